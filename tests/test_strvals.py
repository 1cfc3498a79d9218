import pytest
import yaml

from konjure import strvals
from konjure.strvals import (
    StrvalsError,
    parse,
    parse_file,
    parse_into,
    parse_into_file,
    parse_into_string,
    parse_json,
    parse_string,
    to_yaml,
)


def test_parse_flat_pairs():
    assert parse("name1=value1,name2=value2") == {"name1": "value1", "name2": "value2"}


def test_parse_typed_values():
    result = parse("a=true,b=FALSE,c=null,d=0,e=42,f=007,g=-5")
    assert result == {"a": True, "b": False, "c": None, "d": 0, "e": 42, "f": "007", "g": -5}


def test_parse_int64_boundary():
    assert parse("a=9223372036854775807") == {"a": 9223372036854775807}
    assert parse("a=9223372036854775808") == {"a": "9223372036854775808"}


def test_parse_string_keeps_strings():
    assert parse_string("a=true,b=42,c=null") == {"a": "true", "b": "42", "c": "null"}


def test_parse_nested_map():
    assert parse("outer.inner=value") == {"outer": {"inner": "value"}}


def test_parse_nested_merges_siblings():
    assert parse("outer.a=x,outer.b=y") == {"outer": {"a": "x", "b": "y"}}


def test_parse_list_indices():
    assert parse("list[0]=a,list[2]=c") == {"list": ["a", None, "c"]}


def test_parse_list_of_maps():
    assert parse("list[0].name=x") == {"list": [{"name": "x"}]}


def test_parse_nested_lists():
    assert parse("m[0][1]=x") == {"m": [[None, "x"]]}


def test_parse_brace_list():
    assert parse("a={b,c,1},d=e") == {"a": ["b", "c", 1], "d": "e"}


def test_parse_escapes():
    assert parse(r"a\.b=c\,d") == {"a.b": "c,d"}


def test_parse_empty_value():
    assert parse("a=") == {"a": ""}


def test_parse_empty_input():
    assert parse("") == {}


def test_key_without_value():
    with pytest.raises(StrvalsError, match="has no value"):
        parse("a")


def test_key_ending_with_comma():
    with pytest.raises(StrvalsError, match="cannot end with ,"):
        parse("a,")


def test_nested_key_without_value():
    with pytest.raises(StrvalsError, match="has no value"):
        parse("a.b")


def test_empty_nested_key_map():
    with pytest.raises(StrvalsError, match="key map"):
        parse("a.=b")


def test_unterminated_list():
    with pytest.raises(StrvalsError, match="list must terminate with '}'"):
        parse("a={b")


def test_negative_index():
    with pytest.raises(StrvalsError, match="negative -1 index not allowed"):
        parse("a[-1]=x")


def test_index_too_large():
    with pytest.raises(StrvalsError, match="greater than maximum supported index"):
        parse(f"a[{strvals.MAX_INDEX + 1}]=x")


def test_maximum_index_allowed():
    result = parse(f"a[{strvals.MAX_INDEX}]=x")
    assert len(result["a"]) == strvals.MAX_INDEX + 1
    assert result["a"][-1] == "x"


def test_invalid_index():
    with pytest.raises(StrvalsError, match="error parsing index"):
        parse("a[x]=1")


def test_unexpected_data_after_index():
    with pytest.raises(StrvalsError, match="unexpected data at end of array index"):
        parse("a[0]b=1")


def test_nesting_limit():
    ok_keys = ["k"] * (strvals.MAX_NESTED_NAME_LEVEL + 1)
    result = parse(".".join(ok_keys) + "=v")
    node = result
    for _ in range(strvals.MAX_NESTED_NAME_LEVEL):
        node = node["k"]
    assert node == {"k": "v"}

    too_deep = ["k"] * (strvals.MAX_NESTED_NAME_LEVEL + 2)
    with pytest.raises(StrvalsError, match="nested level"):
        parse(".".join(too_deep) + "=v")


def test_parse_into_merges_and_overwrites():
    dest = {"x": 1, "keep": "yes"}
    parse_into("y=2,x=3", dest)
    assert dest == {"x": 3, "keep": "yes", "y": 2}


def test_parse_into_existing_nested_map():
    dest = {"a": {"b": "c"}}
    parse_into("a.d=e", dest)
    assert dest == {"a": {"b": "c", "d": "e"}}


def test_parse_into_type_conflict():
    with pytest.raises(StrvalsError, match="unable to parse key"):
        parse_into("a.b=c", {"a": "x"})
    with pytest.raises(StrvalsError, match="unable to parse key"):
        parse_into("a[0]=b", {"a": "x"})


def test_parse_into_string():
    dest = {}
    parse_into_string("a=true,b.c=1", dest)
    assert dest == {"a": "true", "b": {"c": "1"}}


def test_parse_file_uses_reader():
    assert parse_file("a=abc", str.upper) == {"a": "ABC"}
    assert parse_file("a={x,y}", str.upper) == {"a": ["X", "Y"]}


def test_parse_into_file():
    seen = []

    def reader(path):
        seen.append(path)
        return path.upper()

    dest = {"z": 1}
    parse_into_file("a=some/path,b[0]=other", dest, reader)
    assert dest == {"z": 1, "a": "SOME/PATH", "b": ["OTHER"]}
    assert seen == ["some/path", "other"]


def test_parse_json_values():
    dest = {}
    parse_json('a={"b":[1,2]},c=null,d=', dest)
    assert dest == {"a": {"b": [1, 2]}, "c": None, "d": None}


def test_parse_json_list_item():
    dest = {}
    parse_json("a[1]=true", dest)
    assert dest == {"a": [None, True]}


def test_parse_json_invalid():
    with pytest.raises(StrvalsError):
        parse_json("a=nope", {})


def test_to_yaml_simple():
    assert to_yaml("name=value") == "name: value"


def test_to_yaml_round_trip():
    spec = "outer.inner=value,list[0]=a,list[1]=2,flag=true"
    text = to_yaml(spec)
    assert not text.endswith("\n")
    assert yaml.safe_load(text) == parse(spec)


def test_to_yaml_error():
    with pytest.raises(StrvalsError, match="has no value"):
        to_yaml("a")