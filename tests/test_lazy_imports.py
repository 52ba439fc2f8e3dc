"""Tests for crumbs.__init__ — lazy imports cover all public names."""

import pytest

import crumbs


@pytest.mark.parametrize("name", crumbs.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(crumbs, name)
    assert obj is not None, f"crumbs.{name} resolved to None"


def test_public_names_are_the_real_objects() -> None:
    from crumbs.definition import cookie
    from crumbs.session import take

    assert crumbs.cookie is cookie
    assert crumbs.take is take


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        crumbs.__getattr__("ThisDoesNotExist")
