import io
import unittest

from bngkit.BNG.config import ExportOptions
from bngkit.BNG.exceptions import CompartmentHierarchyError
from bngkit.BNG.exporter import BNGLExporter
from bngkit.BNG.model import (
    BNGData,
    Compartment,
    ComponentType,
    MoleculeType,
    ReactionRule,
)
from bngkit.BNG.rxn_container import RxnContainer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def finalize(data: BNGData) -> BNGLExporter:
    rxns = RxnContainer(data)
    for r in data.get_rxn_rules():
        rxns.add_and_finalize(r)
    return BNGLExporter(data, rxns)


def export_all(exporter: BNGLExporter, options=None):
    sinks = [io.StringIO() for _ in range(4)]
    err = exporter.export_to_bngl(*sinks, options)
    return err, [s.getvalue() for s in sinks]


def build_cell_model() -> BNGData:
    """
    Volume molecules A, B in CP, surface receptor R in PM, surface class SC.

    Compartments: default, EC > PM > CP (declared child-first).
    """
    data = BNGData()
    data.add_elem_mol_type(
        MoleculeType(
            "A",
            diffusion_constant=1e-6,
            components=(ComponentType("s", ("0", "1")), ComponentType("b")),
        )
    )
    data.add_elem_mol_type(MoleculeType("B", diffusion_constant=2e-6))
    data.add_elem_mol_type(MoleculeType("R", diffusion_constant=1e-7, is_surf=True))
    data.add_elem_mol_type(MoleculeType("SC", is_reactive_surface=True))
    data.add_elem_mol_type(MoleculeType("ALL_MOLECULES"))

    data.add_compartment(Compartment(3, "CP", volume_or_area=0.5, parent_id=2))
    data.add_compartment(Compartment(0, "default"))
    data.add_compartment(
        Compartment(2, "PM", is_3d=False, volume_or_area=6.0, parent_id=1, children_ids=[3])
    )
    data.add_compartment(Compartment(1, "EC", volume_or_area=100.0, children_ids=[2]))

    data.add_rxn_rule(ReactionRule(reactants=("A",), products=("B",), base_rate_constant=0.5))
    data.add_rxn_rule(ReactionRule(reactants=("A", "B"), products=("A",), base_rate_constant=1e7))
    data.add_rxn_rule(ReactionRule(reactants=("R", "R"), products=("R",), base_rate_constant=0.01))
    return data


def body(section: str) -> list:
    """Lines between BEGIN and END."""
    lines = section.splitlines()
    return lines[1:-1]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestEmptyModel(unittest.TestCase):
    def test_empty_blocks(self):
        data = BNGData(compartments=[Compartment(0, "default")])
        err, (params, mts, comps, rules) = export_all(finalize(data))

        self.assertEqual(err, "")
        self.assertEqual(mts, "BEGIN MOLECULE_TYPES\nEND MOLECULE_TYPES\n")
        self.assertEqual(rules, "BEGIN REACTION_RULES\nEND REACTION_RULES\n")
        self.assertEqual(comps, "BEGIN COMPARTMENTS\nEND COMPARTMENTS\n")
        self.assertNotIn("default", params)


class TestMoleculeTypes(unittest.TestCase):
    def test_declarations_and_diffusion_constants(self):
        exporter = finalize(build_cell_model())
        params, mts = io.StringIO(), io.StringIO()
        exporter.export_molecule_types(params, mts)

        self.assertEqual(body(mts.getvalue()), ["  A(s~0~1,b)", "  B()", "  R()"])
        p = params.getvalue()
        self.assertIn("  MCELL_DIFFUSION_CONSTANT_3D_A 1e-6\n", p)
        self.assertIn("  MCELL_DIFFUSION_CONSTANT_3D_B 2e-6\n", p)
        self.assertIn("  MCELL_DIFFUSION_CONSTANT_2D_R 1e-7\n", p)
        self.assertNotIn("SC", p)
        self.assertNotIn("ALL_MOLECULES", p + mts.getvalue())


class TestCompartments(unittest.TestCase):
    def test_parent_first_and_default_skipped(self):
        exporter = finalize(build_cell_model())
        params, comps = io.StringIO(), io.StringIO()
        err = exporter.export_compartments(params, comps)

        self.assertEqual(err, "")
        self.assertEqual(
            body(comps.getvalue()),
            [
                "  EC 3 vol_EC",
                "  PM 2 area_PM * THICKNESS EC",
                "  CP 3 vol_CP PM",
            ],
        )
        p = params.getvalue()
        self.assertIn("  vol_EC 100 # um^3\n", p)
        self.assertIn("  area_PM 6 # um^2\n", p)
        self.assertIn("  vol_PM area_PM * THICKNESS # um^3\n", p)
        self.assertIn("  vol_CP 0.5 # um^3\n", p)
        self.assertNotIn("default", p + comps.getvalue())

    def test_parent_default_is_not_referenced(self):
        data = BNGData()
        data.add_child_compartment(None, Compartment(0, "default"))
        data.add_child_compartment(0, Compartment(1, "CP", volume_or_area=2.0))
        params, comps = io.StringIO(), io.StringIO()
        finalize(data).export_compartments(params, comps)
        self.assertEqual(body(comps.getvalue()), ["  CP 3 vol_CP"])

    def test_malformed_hierarchy_is_fatal(self):
        data = BNGData(compartments=[Compartment(0, "A", parent_id=9)])
        with self.assertRaises(CompartmentHierarchyError):
            finalize(data).export_compartments(io.StringIO(), io.StringIO())


class TestExportToBngl(unittest.TestCase):
    def test_full_export(self):
        err, (params, mts, comps, rules) = export_all(finalize(build_cell_model()))

        self.assertEqual(err, "")
        self.assertEqual(
            body(rules),
            ["  A() -> B() k0", "  A() + B() -> A() k1", "  R() + R() -> R() k2"],
        )
        self.assertIn("  k0 0.5\n", params)
        self.assertIn("  k1 10000000 / MCELL2BNG_VOL_CONV * VOL_RXN\n", params)
        self.assertIn("  k2 0.01 / MCELL2BNG_SURF_CONV * SURF_RXN\n", params)

    def test_parameter_sections_in_fixed_order(self):
        _, (params, _, _, _) = export_all(finalize(build_cell_model()))
        diffusion = params.index("MCELL_DIFFUSION_CONSTANT_3D_A")
        thickness = params.index("THICKNESS 0.01")
        rate = params.index("k0 ")
        size = params.index("vol_EC ")
        self.assertLess(diffusion, thickness)
        self.assertLess(thickness, rate)
        self.assertLess(rate, size)

    def test_reactive_surface_rule_in_diagnostics(self):
        data = build_cell_model()
        data.add_rxn_rule(
            ReactionRule(
                reactants=("A", "SC"),
                products=("B",),
                base_rate_constant=3.0,
                pattern="A(s~0)@CP + SC -> B()@CP",
            )
        )
        err, (params, _, _, rules) = export_all(finalize(data))

        self.assertIn("A(s~0)@CP + SC -> B()@CP", err)
        self.assertEqual(len(body(rules)), 4)
        self.assertIn("  k3 3\n", params)
        self.assertIn("  k2 0.01 / MCELL2BNG_SURF_CONV * SURF_RXN\n", params)

    def test_nfsim_mode(self):
        options = ExportOptions(
            rates_for_nfsim=True, volume_um3_for_nfsim=0.5, area_um2_for_nfsim=6.0
        )
        _, (params, _, _, _) = export_all(finalize(build_cell_model()), options)
        self.assertIn("RATE_CONV_VOLUME 0.5 * 1e-15", params)
        self.assertIn("RATE_CONV_AREA 6 * THICKNESS * 1e-15", params)

    def test_export_does_not_mutate_model(self):
        data = build_cell_model()
        before = [(c.id, c.parent_id, list(c.children_ids)) for c in data.get_compartments()]
        exporter = finalize(data)
        first = export_all(exporter)
        second = export_all(exporter)
        after = [(c.id, c.parent_id, list(c.children_ids)) for c in data.get_compartments()]
        self.assertEqual(before, after)
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
