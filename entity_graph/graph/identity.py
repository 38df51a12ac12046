"""
Entity naming and identity resolution.

Every object the walker visits becomes an entity identified by the pair
(entity name, entity id). The id comes from the object itself when it has
one; otherwise a strategy synthesizes a deterministic id from the entity
name and the object's position.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from ..errors import InvalidConfigurationError
from ..types import JsonObject, JsonPrimitive
from .json_values import classify

IDENTITY_FIELD = "id"
VALUE_FIELD = "value"


def capitalize(key: str) -> str:
    """Upper-case the first character only: orderHistory -> OrderHistory."""
    return key[:1].upper() + key[1:]


def singularize(key: str) -> str:
    """Best-effort English singular of a collection key."""
    lowered = key.lower()
    if len(key) > 3 and lowered.endswith("ies"):
        return key[:-3] + ("Y" if key[-3:].isupper() else "y")
    if lowered.endswith(("sses", "xes", "ches", "shes")):
        return key[:-2]
    if lowered.endswith(("ss", "us", "is")):
        return key
    if len(key) > 1 and lowered.endswith("s"):
        return key[:-1]
    return key


def entity_name_for_object(key: str) -> str:
    return key.upper()


def entity_name_for_array(key: str) -> str:
    return singularize(key).upper()


@dataclass(frozen=True)
class EntityRef:
    """Who an object is, and which of its fields carries that identity."""
    name: str
    entity_id: str
    id_field: str


class IdentityStrategy:
    """Synthesizes ids for objects that carry none."""

    scheme = ""

    def for_item(self, entity_name: str, field_key: str, index: int, parent_id: Optional[str] = None) -> str:
        raise NotImplementedError

    def for_child(self, entity_name: str, field_key: str, parent_id: Optional[str] = None) -> str:
        raise NotImplementedError


class PositionalIdentity(IdentityStrategy):
    """ADDRESS[0] for array items, AddressId for singular children."""

    scheme = "positional"

    def for_item(self, entity_name: str, field_key: str, index: int, parent_id: Optional[str] = None) -> str:
        return f"{entity_name}[{index}]"

    def for_child(self, entity_name: str, field_key: str, parent_id: Optional[str] = None) -> str:
        return f"{capitalize(field_key)}Id"


class FixedSuffixIdentity(IdentityStrategy):
    """ADDRESS001, ADDRESS002 for array items, ADDRESS001 for singular children."""

    scheme = "fixed-suffix"

    def for_item(self, entity_name: str, field_key: str, index: int, parent_id: Optional[str] = None) -> str:
        return f"{entity_name}{index + 1:03d}"

    def for_child(self, entity_name: str, field_key: str, parent_id: Optional[str] = None) -> str:
        return f"{entity_name}001"


class ScopedIdentity(PositionalIdentity):
    """Positional ids prefixed with the parent entity id: U1/ADDRESS[0].

    Keeps id-less items of different parents apart.
    """

    scheme = "scoped"

    def for_item(self, entity_name: str, field_key: str, index: int, parent_id: Optional[str] = None) -> str:
        return self._scope(parent_id, super().for_item(entity_name, field_key, index))

    def for_child(self, entity_name: str, field_key: str, parent_id: Optional[str] = None) -> str:
        return self._scope(parent_id, super().for_child(entity_name, field_key))

    @staticmethod
    def _scope(parent_id: Optional[str], entity_id: str) -> str:
        return f"{parent_id}/{entity_id}" if parent_id else entity_id


IDENTITY_SCHEMES: Dict[str, Type[IdentityStrategy]] = {
    PositionalIdentity.scheme: PositionalIdentity,
    FixedSuffixIdentity.scheme: FixedSuffixIdentity,
    ScopedIdentity.scheme: ScopedIdentity,
}


def get_identity_strategy(scheme: str) -> IdentityStrategy:
    try:
        return IDENTITY_SCHEMES[scheme]()
    except KeyError:
        raise InvalidConfigurationError(
            f"Unknown identity scheme {scheme!r}; expected one of {sorted(IDENTITY_SCHEMES)}"
        ) from None


class IdentityResolver:
    """Resolves entity ids; pure, the same inputs always give the same id."""

    def __init__(self, strategy: Optional[IdentityStrategy] = None):
        self.strategy = strategy or PositionalIdentity()

    def candidate_id_fields(self, field_key: str, is_item: bool):
        base = singularize(field_key) if is_item else field_key
        yield IDENTITY_FIELD
        if base:
            yield f"{base[:1].lower()}{base[1:]}Id"

    def explicit_id(self, field_key: str, candidate: Any, is_item: bool):
        """Return (id, id_field) of the first usable id on `candidate`, else None."""
        if isinstance(candidate, dict):
            candidate = JsonObject(tuple(candidate.items()))
        if not isinstance(candidate, JsonObject):
            return None
        for id_field in self.candidate_id_fields(field_key, is_item):
            raw = candidate.get(id_field)
            if raw is None:
                continue
            value = classify(id_field, raw)
            if isinstance(value, JsonPrimitive) and value.text != "":
                return value.text, id_field
        return None

    def resolve(self, field_key: str, candidate: Any, index: Optional[int] = None,
                parent_id: Optional[str] = None) -> str:
        """Entity id for `candidate` found under `field_key`.

        `index` is the zero-based position for array items and None for a
        singular child object. `parent_id` is the enclosing entity's id and
        only matters to schemes that scope synthesized ids.
        """
        return self.identify(field_key, candidate, index, parent_id=parent_id).entity_id

    def identify(self, field_key: str, candidate: Any, index: Optional[int] = None,
                 parent_id: Optional[str] = None, id_field: Optional[str] = None) -> EntityRef:
        is_item = index is not None
        name = entity_name_for_array(field_key) if is_item else entity_name_for_object(field_key)

        found = self.explicit_id(field_key, candidate, is_item)
        if found is not None:
            entity_id, found_field = found
            return EntityRef(name, entity_id, found_field)

        if is_item:
            entity_id = self.strategy.for_item(name, field_key, index, parent_id)
        else:
            entity_id = self.strategy.for_child(name, field_key, parent_id)
        return EntityRef(name, entity_id, id_field or IDENTITY_FIELD)
