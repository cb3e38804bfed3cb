from pathlib import Path

from specstack.parser.base import Column, Function, PrimitiveType, Spec, Table
from specstack.parser.openapi import parse_openapi
from specstack.parser.validator import validate_spec

FIXTURES = Path(__file__).parent / "fixtures"


def _func(name: str) -> Function:
    return Function(name=name, method="GET", path="/x")


class TestValidateSpec:
    def test_petstore_is_clean(self):
        assert validate_spec(parse_openapi(FIXTURES / "petstore.yaml")) == {}

    def test_empty_spec(self):
        assert validate_spec(Spec()) == {}

    def test_function_names_that_sanitize_alike(self):
        errors = validate_spec(Spec(functions=[_func("pets.list"), _func("petslist")]))
        assert list(errors) == ["function petslist"]
        assert errors["function petslist"] == "2 functions map to 'petslist' ('pets.list', 'petslist')"

    def test_hook_names_that_collide(self):
        errors = validate_spec(Spec(functions=[_func("get_pet"), _func("getPet")]))
        assert list(errors) == ["hook useGetPet"]
        assert "'get_pet', 'getPet'" in errors["hook useGetPet"]

    def test_table_names_that_sanitize_alike(self):
        column = Column(name="id", type=PrimitiveType(name="integer"), nullable=False)
        spec = Spec(tables=[Table(name="Pet-Item", columns=[column]), Table(name="PetItem")])
        errors = validate_spec(spec)
        assert list(errors) == ["table PetItem"]

    def test_table_and_function_may_share_a_name(self):
        spec = Spec(tables=[Table(name="Pet")], functions=[_func("Pet")])
        assert validate_spec(spec) == {}
