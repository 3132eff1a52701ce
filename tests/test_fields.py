import pytest

from kamayan.fields import (
    DENS,
    ENER,
    MOMENTUM,
    Metadata,
    StateDescriptor,
    Variable,
    add_fields,
    center_flags,
    face_flags,
)


def test_variable_names_are_lower_case():
    assert Variable("DENS").name == "dens"
    assert Variable("MoMentum", (3,)).name == "momentum"
    assert DENS.name == "dens"
    assert MOMENTUM.name == "momentum"


def test_component_counts():
    assert DENS.n_comps == 1
    assert DENS.shape == (1,)
    assert MOMENTUM.n_comps == 3
    assert Variable("grid", (2, 3)).n_comps == 6


def test_component_selection():
    component = MOMENTUM(2)
    assert component.index == 2
    assert component.name == MOMENTUM.name
    assert DENS() == DENS


def test_component_out_of_range():
    with pytest.raises(IndexError):
        MOMENTUM(3)
    with pytest.raises(IndexError):
        DENS(1)


def test_invalid_shape():
    with pytest.raises(ValueError):
        Variable("bad", (0,))


def test_center_and_face_flags():
    assert center_flags(Metadata.WITH_FLUXES) == [
        Metadata.CELL,
        Metadata.RESTART,
        Metadata.FILL_GHOST,
        Metadata.WITH_FLUXES,
    ]
    assert face_flags() == [Metadata.FACE, Metadata.FILL_GHOST]


def test_add_fields_registers_in_order():
    pkg = StateDescriptor("Test Package")
    add_fields(pkg, [DENS, MOMENTUM, ENER], center_flags(Metadata.WITH_FLUXES))
    assert list(pkg.fields) == ["dens", "momentum", "ener"]
    assert pkg.fields["momentum"].shape == (3,)
    assert pkg.variables(Metadata.CELL, Metadata.WITH_FLUXES) == [DENS, MOMENTUM, ENER]
    assert pkg.variables(Metadata.FACE) == []


def test_add_field_with_shape():
    pkg = StateDescriptor("pkg")
    pkg.add_field(DENS, face_flags(), shape=(2,))
    assert pkg.fields["dens"].variable.n_comps == 2


def test_duplicate_field_raises():
    pkg = StateDescriptor("pkg")
    pkg.add_field(DENS, center_flags())
    with pytest.raises(ValueError):
        pkg.add_field(DENS, center_flags())


def test_non_flag_raises():
    pkg = StateDescriptor("pkg")
    with pytest.raises(TypeError):
        pkg.add_field(DENS, ["cell"])


def test_params():
    pkg = StateDescriptor("driver")
    pkg.add_param("sim_time", 0.5, mutable=True)
    pkg.add_param("config", "fixed")
    pkg.update_param("sim_time", 1.5)
    assert pkg.param("sim_time") == 1.5
    assert pkg.param("config") == "fixed"
    with pytest.raises(ValueError):
        pkg.update_param("config", "changed")
    with pytest.raises(KeyError):
        pkg.param("missing")
    with pytest.raises(KeyError):
        pkg.add_param("config", "again")