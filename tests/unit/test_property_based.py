"""Property-based tests using hypothesis."""

from __future__ import annotations

import asyncio

from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from fieldgrammar import (
    ArrayField,
    BoolField,
    EnumArrayField,
    EnumField,
    FixedField,
    IntField,
    ObjectField,
    OptionalField,
    Schema,
    UnionField,
    decode,
    default_data,
    encode,
    to_config,
    to_wire,
)
from fieldgrammar.codec import base64url
from fieldgrammar.models import same_shape, tree_depth
from fieldgrammar.tokens import compressed
from fieldgrammar.tokens.bitpacked import decode_schema, encode_schema

# Letters only; the union discriminator is always named "kind"
names = st.text(alphabet="abcdefgh", min_size=1, max_size=3)
option_lists = st.lists(names, min_size=1, max_size=4, unique=True)

FIXED_GRIDS = [
    (-40.0, 125.0, 0.5),
    (0.0, 1.0, 0.1),
    (-90.0, 90.0, 0.000001),
    (-5.0, 100.0, 0.01),
]


def field_lists(children):
    return st.lists(children, max_size=3, unique_by=lambda node: node.name)


@st.composite
def unions(draw, children):
    name = draw(names)
    options = draw(option_lists)
    variants = {option: draw(field_lists(children)) for option in options}
    return UnionField(name, EnumField("kind", options), variants)


def node_trees(min_lengths=st.integers(0, 3)):
    """Pointer-free node trees; ``min_lengths`` draws array minLength values."""
    leaves = st.one_of(
        names.map(BoolField),
        st.builds(
            lambda name, low, span: IntField(name, low, low + span),
            names,
            st.integers(-(2**20), 2**20),
            st.integers(0, 2**20),
        ),
        st.builds(lambda name, grid: FixedField(name, *grid), names, st.sampled_from(FIXED_GRIDS)),
        st.builds(EnumField, names, option_lists),
        st.builds(
            lambda name, low, span, options: EnumArrayField(name, low, low + span, options),
            names,
            min_lengths,
            st.integers(0, 3),
            option_lists,
        ),
    )

    def containers(children):
        return st.one_of(
            st.builds(OptionalField, names, children),
            st.builds(
                lambda name, low, span, item: ArrayField(name, low, low + span, item),
                names,
                min_lengths,
                st.integers(0, 2),
                children,
            ),
            st.builds(ObjectField, names, field_lists(children)),
            unions(children),
        )

    return st.recursive(leaves, containers, max_leaves=8)


def schema_trees(min_lengths=st.integers(0, 3)):
    return st.builds(
        Schema.create,
        names,
        st.lists(node_trees(min_lengths), max_size=4, unique_by=lambda node: node.name),
    )


nodes = node_trees()
schemas = schema_trees()
# Arrays default to [], so default data needs minLength 0 throughout
defaultable_schemas = schema_trees(st.just(0))

SLOW = settings(
    max_examples=30,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.filter_too_much],
)


class TestSchemaTokenProperties:
    """Property-based tests for schema tokens."""

    @SLOW
    @given(schema=schemas)
    def test_bitpacked_roundtrip(self, schema: Schema) -> None:
        """Every schema within the depth bound survives the bit-packed codec."""
        assume(all(tree_depth(field) <= 5 for field in schema.fields))

        token = encode_schema(schema.name, schema.fields)

        assert base64url.is_token(token)
        assert decode_schema(token) == schema

    @SLOW
    @given(schema=schemas)
    def test_bitpacked_deterministic(self, schema: Schema) -> None:
        """Encoding is a pure function of the schema."""
        assume(all(tree_depth(field) <= 5 for field in schema.fields))

        assert encode_schema(schema.name, schema.fields) == encode_schema(
            schema.name, schema.fields
        )

    @SLOW
    @given(schema=schemas)
    def test_compressed_roundtrip(self, schema: Schema) -> None:
        """Every schema survives the compressed codec."""

        async def run() -> tuple[str, Schema]:
            token = await compressed.encode_schema(schema.name, schema.fields)
            return token, await compressed.decode_schema(token)

        token, decoded = asyncio.run(run())

        assert base64url.is_token(token)
        assert decoded == schema


class TestConversionProperties:
    """Property-based tests for builder conversion."""

    @given(node=nodes)
    def test_wire_config_roundtrip(self, node) -> None:
        """Nodes convert to configs and back unchanged."""
        assert to_wire(to_config(node)) == node

    @given(node=nodes)
    def test_conversion_idempotent(self, node) -> None:
        """A second config -> wire -> config pass changes nothing."""
        once = to_config(to_wire(to_config(node)))
        twice = to_config(to_wire(once))

        assert same_shape(once, twice)


class TestDataCodecProperties:
    """Property-based tests for the data codec."""

    @given(schema=defaultable_schemas)
    def test_defaults_roundtrip(self, schema: Schema) -> None:
        """Default data of any pointer-free schema encodes and decodes to itself."""
        data = default_data(schema)
        assert decode(schema, encode(schema, data)) == data

    @given(
        value=st.integers(min_value=-500, max_value=500),
        flag=st.booleans(),
        items=st.lists(st.sampled_from(["a", "b", "c"]), max_size=4),
    )
    def test_encode_decode_roundtrip(self, value: int, flag: bool, items: list[str]) -> None:
        """Test encode/decode is invertible."""
        schema = [
            IntField("value", -500, 500),
            BoolField("flag"),
            EnumArrayField("items", 0, 4, ["a", "b", "c"]),
        ]
        data = {"value": value, "flag": flag, "items": items}

        assert decode(schema, encode(schema, data)) == data
