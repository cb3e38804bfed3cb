from specstack.parser.base import ArrayType, ObjectType, PrimitiveType, RefType
from specstack.typemap import (
    DEFAULT_POLICY,
    NamingPolicy,
    capitalize,
    entity_names,
    hook_name,
    inline_descriptor,
    map_to_client_type,
    map_to_sql_type,
    pascal_case,
    sanitize_identifier,
    type_from_name,
    unique_name,
)


class TestSanitizeIdentifier:
    def test_valid_identifier_unchanged(self):
        assert sanitize_identifier("Pet", "x") == "Pet"
        assert sanitize_identifier("pet_owner", "x") == "pet_owner"

    def test_strips_trailing_array_marker(self):
        assert sanitize_identifier("Pet[]", "x") == "Pet"

    def test_removes_invalid_characters(self):
        assert sanitize_identifier("pet-store.v2", "x") == "petstorev2"

    def test_prefixes_leading_digit(self):
        assert sanitize_identifier("2fa", "x") == "_2fa"

    def test_falls_back_when_empty(self):
        assert sanitize_identifier("", "fallback") == "fallback"
        assert sanitize_identifier(None, "fallback") == "fallback"
        assert sanitize_identifier("-/-", "fallback") == "fallback"
        assert sanitize_identifier("[]", "fallback") == "fallback"

    def test_inline_descriptor_is_usable(self):
        assert sanitize_identifier(inline_descriptor("createPet", "request"), "x") == "inline_createPet_request"


class TestUniqueName:
    def test_free_name_is_kept(self):
        taken = {"id"}
        assert unique_name("name", taken) == "name"
        assert taken == {"id", "name"}

    def test_taken_name_is_suffixed(self):
        taken = {"body", "body_2"}
        assert unique_name("body", taken) == "body_3"

    def test_ignore_case(self):
        taken: set[str] = set()
        assert unique_name("Ab", taken, ignore_case=True) == "Ab"
        assert unique_name("ab", taken, ignore_case=True) == "ab_2"
        assert unique_name("ab", set(), ignore_case=False) == "ab"


class TestNames:
    def test_capitalize_only_first_letter(self):
        assert capitalize("getPetById") == "GetPetById"
        assert capitalize("") == ""

    def test_pascal_case_splits_on_separators(self):
        assert pascal_case("pets-creation") == "PetsCreation"
        assert pascal_case("{petId}") == "PetId"
        assert pascal_case("get_pet_by_id") == "GetPetById"

    def test_hook_name(self):
        assert hook_name("getPetById") == "useGetPetById"
        assert hook_name("createPet") == "useCreatePet"


class TestSqlMapping:
    def test_primitives(self):
        assert map_to_sql_type(PrimitiveType(name="integer")) == "INTEGER"
        assert map_to_sql_type(PrimitiveType(name="number")) == "FLOAT"
        assert map_to_sql_type(PrimitiveType(name="boolean")) == "BOOLEAN"
        assert map_to_sql_type(PrimitiveType(name="string")) == "VARCHAR"
        assert map_to_sql_type(PrimitiveType()) == "TEXT"

    def test_date_time_string(self):
        assert map_to_sql_type(PrimitiveType(name="string", format="date-time")) == "TIMESTAMP"
        assert map_to_sql_type(PrimitiveType(name="string", format="uuid")) == "VARCHAR"

    def test_references_and_objects_are_json(self):
        assert map_to_sql_type(RefType(name="Owner")) == "JSONB"
        assert map_to_sql_type(ObjectType()) == "JSONB"

    def test_arrays_of_any_depth(self):
        assert map_to_sql_type(ArrayType(items=PrimitiveType(name="string"))) == "VARCHAR[]"
        assert map_to_sql_type(ArrayType(items=ArrayType(items=PrimitiveType(name="number")))) == "FLOAT[][]"
        assert map_to_sql_type(ArrayType(items=ObjectType())) == "JSONB[]"


class TestClientMapping:
    def test_primitives(self):
        assert map_to_client_type(PrimitiveType(name="integer")) == "number"
        assert map_to_client_type(PrimitiveType(name="number")) == "number"
        assert map_to_client_type(PrimitiveType(name="boolean")) == "boolean"
        assert map_to_client_type(PrimitiveType(name="string", format="date-time")) == "string"
        assert map_to_client_type(PrimitiveType()) == "any"

    def test_reference_uses_entity_name(self):
        assert map_to_client_type(RefType(name="Pet")) == "Pet"

    def test_object_is_opaque_record(self):
        assert map_to_client_type(ObjectType()) == "Record<string, any>"

    def test_arrays_of_any_depth(self):
        assert map_to_client_type(ArrayType(items=RefType(name="Pet"))) == "Pet[]"
        assert map_to_client_type(ArrayType(items=ArrayType(items=PrimitiveType(name="integer")))) == "number[][]"


class TestTypeFromName:
    def test_uppercase_name_is_entity(self):
        assert type_from_name("Pet") == RefType(name="Pet")

    def test_array_marker(self):
        assert type_from_name("Pet[]") == ArrayType(items=RefType(name="Pet"))
        assert type_from_name("string[][]") == ArrayType(items=ArrayType(items=PrimitiveType(name="string")))

    def test_primitive_names(self):
        assert type_from_name("integer") == PrimitiveType(name="integer")

    def test_inline_placeholder_is_object(self):
        assert type_from_name(inline_descriptor("listPets", "response")) == ObjectType()

    def test_lowercase_unknown_name_is_unknown(self):
        assert type_from_name("pet") == PrimitiveType()

    def test_policy_can_be_replaced(self):
        policy = NamingPolicy(is_entity_reference=lambda name: name in {"pet"})
        assert type_from_name("pet", policy) == RefType(name="pet")
        assert type_from_name("Pet", policy) == PrimitiveType()


class TestEntityNames:
    def test_collects_nested_references_once(self):
        node = ObjectType(properties={
            "owner": RefType(name="Owner"),
            "friends": ArrayType(items=RefType(name="Owner")),
            "pet": RefType(name="Pet"),
        })
        assert entity_names(node) == ["Owner", "Pet"]

    def test_primitives_have_none(self):
        assert entity_names(PrimitiveType(name="string")) == []


class TestDefaultPolicy:
    def test_id_is_primary_key(self):
        assert DEFAULT_POLICY.is_primary_key("id") is True
        assert DEFAULT_POLICY.is_primary_key("ID") is False
        assert DEFAULT_POLICY.is_primary_key("pet_id") is False
