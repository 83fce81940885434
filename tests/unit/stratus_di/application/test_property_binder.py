"""Unit tests for PropertyBinder and value coercion."""

from typing import Optional

import pytest

from stratus_di.application.descriptors import describe_component
from stratus_di.application.property_binder import PropertyBinder, coerce_value, lookup_resource
from stratus_di.domain import BindingError, IPropertyBinder, ResourceMissingError, config_properties


@config_properties("db")
class DbConfig:
    url: str
    user: str
    password: str
    pool_size: int = 4
    timeout: float
    ssl: bool
    replica: Optional[str]


class TestCoerceValue:
    """Test cases for coerce_value."""

    def test_strings_pass_through(self):
        """Test that strings are returned unchanged."""
        assert coerce_value(str, " jdbc:x ") == " jdbc:x "

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("TRUE", True), ("True", True), ("false", False), ("yes", False), ("1", False), ("", False)],
    )
    def test_bool_is_true_only_for_true_literal(self, raw, expected):
        """Test that booleans are true only for a case-insensitive 'true'."""
        assert coerce_value(bool, raw) is expected

    def test_numbers(self):
        """Test integer and float parsing."""
        assert coerce_value(int, "42") == 42
        assert coerce_value(float, "1.5") == 1.5

    def test_invalid_integer_raises(self):
        """Test that a malformed integer raises ValueError."""
        with pytest.raises(ValueError):
            coerce_value(int, "forty-two")

    def test_optional_coerces_as_inner_type(self):
        """Test that Optional[int] coerces as int."""
        assert coerce_value(Optional[int], "7") == 7

    def test_unknown_type_gets_raw_string(self):
        """Test that unrecognized types receive the raw string."""
        assert coerce_value(list, "a,b") == "a,b"


class TestPropertyBinder:
    """Test cases for PropertyBinder.bind."""

    def test_implements_interface(self):
        """Test that PropertyBinder implements IPropertyBinder."""
        assert isinstance(PropertyBinder(), IPropertyBinder)

    def test_bind_populates_fields_from_prefixed_keys(self):
        """Test binding a holder from a flat map."""
        config = {
            "db.url": "jdbc:x",
            "db.user": "admin",
            "db.pool_size": "10",
            "db.timeout": "2.5",
            "db.ssl": "TRUE",
            "other.url": "ignored",
        }

        holder = PropertyBinder().bind(describe_component(DbConfig), config)

        assert isinstance(holder, DbConfig)
        assert holder.url == "jdbc:x"
        assert holder.user == "admin"
        assert holder.pool_size == 10
        assert holder.timeout == 2.5
        assert holder.ssl is True

    def test_missing_keys_keep_default_or_get_zero_value(self):
        """Test that absent keys leave defaults and otherwise set the type's zero value."""
        holder = PropertyBinder().bind(describe_component(DbConfig), {"db.url": "jdbc:x"})

        assert holder.password is None
        assert holder.replica is None
        assert holder.pool_size == 4
        assert holder.timeout == 0.0
        assert isinstance(holder.timeout, float)
        assert holder.ssl is False

    def test_missing_integer_without_default_is_zero(self):
        """Test that an int field with no key and no default becomes 0."""

        @config_properties("pool")
        class PoolConfig:
            size: int

        holder = PropertyBinder().bind(describe_component(PoolConfig), {})

        assert holder.size == 0

    def test_each_bind_returns_a_fresh_holder(self):
        """Test that holders are not cached."""
        binder = PropertyBinder()
        descriptor = describe_component(DbConfig)

        assert binder.bind(descriptor, {}) is not binder.bind(descriptor, {})

    def test_coercion_failure_raises_binding_error(self):
        """Test that a malformed value is reported as BindingError."""
        with pytest.raises(BindingError) as exc_info:
            PropertyBinder().bind(describe_component(DbConfig), {"db.pool_size": "many"})

        assert exc_info.value.cls is DbConfig
        assert "Failed to bind config for DbConfig" in str(exc_info.value)

    def test_holder_without_default_constructor_raises_binding_error(self):
        """Test that a holder needing constructor arguments cannot be bound."""

        @config_properties("cache")
        class CacheConfig:
            size: int

            def __init__(self, size):
                self.size = size

        with pytest.raises(BindingError):
            PropertyBinder().bind(describe_component(CacheConfig), {"cache.size": "3"})


class TestLookupResource:
    """Test cases for lookup_resource."""

    def test_present_key(self):
        """Test that the raw value is returned."""
        assert lookup_resource({"service.env": "prod"}, "service.env") == "prod"

    def test_empty_value_is_present(self):
        """Test that an empty string still counts as present."""
        assert lookup_resource({"service.env": ""}, "service.env") == ""

    def test_missing_key_raises(self):
        """Test that an absent key raises ResourceMissingError."""
        with pytest.raises(ResourceMissingError) as exc_info:
            lookup_resource({}, "service.env")

        assert exc_info.value.key == "service.env"
