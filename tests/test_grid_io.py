from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

import numpy as np
from jsonschema.exceptions import ValidationError

from pdfgrid.config import LoadConfig
from pdfgrid.grid_io import (
    load_descriptor,
    read_container,
    read_metadata,
    resolve_set_path,
    write_container,
)
from pdfgrid.metadata import MetaData, MetaDataV2
from pdfgrid.subgrid import SubGrid

RECORD = {
    "SetDesc": "container test",
    "SetIndex": 1,
    "NumMembers": 2,
    "XMin": 1.0e-5,
    "XMax": 1.0,
    "QMin": 1.0,
    "QMax": 100.0,
    "Flavors": [1, 21],
    "Format": "neopdf",
}


def _fixed(offset: float = 0.0) -> SubGrid:
    return SubGrid.fixed_rank(
        nucleons=[1.0],
        alphas=[0.118],
        kts=[0.0],
        xs=[1.0e-5, 1.0e-2, 1.0],
        q2s=[1.0, 10.0],
        nflav=2,
        payload=np.arange(12, dtype=float) + offset,
    )


def _variable() -> SubGrid:
    return SubGrid.variable_rank(
        nucleons=[1.0],
        alphas=[0.118],
        xis=[0.1, 0.3, 0.5],
        deltas=[0.0],
        kts=[0.0],
        xs=[1.0e-5, 1.0],
        q2s=[10.0, 100.0],
        nflav=2,
        payload=np.linspace(0.0, 1.0, 24),
    )


class TestContainerRoundTrip(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_write_then_read(self) -> None:
        md = MetaData.from_record(dict(RECORD, XiMin=0.1, XiMax=0.5))
        members = [(_fixed(), _variable()), (_fixed(100.0),)]
        path = write_container(self.root / "set.npz", md, members)
        self.assertTrue(path.is_file())
        self.assertFalse((self.root / "set.tmp.npz").exists())

        container = read_container(path)
        self.assertEqual(container.metadata, md)
        self.assertEqual(container.num_members, 2)
        self.assertEqual(len(container.subgrids(0)), 2)
        self.assertEqual(len(container.subgrids(1)), 1)

        for written, loaded in zip(members[0] + members[1], container.subgrids(0) + container.subgrids(1)):
            self.assertIs(loaded.config, written.config)
            self.assertEqual(loaded.is_variable_rank, written.is_variable_rank)
            np.testing.assert_array_equal(loaded.grid.view(), written.grid.view())
            np.testing.assert_array_equal(loaded.xis, written.xis)
            np.testing.assert_array_equal(loaded.q2s, written.q2s)

    def test_subgrid_lookup(self) -> None:
        md = MetaData.from_record(RECORD)
        path = write_container(self.root / "set.npz", md, [(_fixed(),)])
        container = read_container(path)
        self.assertEqual(container.subgrid(0, 0).nflav, 2)
        with self.assertRaises(IndexError):
            container.subgrid(0, 1)
        with self.assertRaises(IndexError):
            container.subgrids(1)

    def test_marker_preserves_zero_v2_bounds(self) -> None:
        md = MetaData(MetaDataV2.from_record(RECORD))
        path = write_container(self.root / "zero.npz", md, [(_fixed(),)])
        self.assertTrue(read_metadata(path).is_v2)

    def test_without_marker_zero_v2_bounds_read_as_v1(self) -> None:
        md = MetaData(MetaDataV2.from_record(RECORD))
        config = LoadConfig(write_version_marker=False)
        path = write_container(self.root / "legacy.npz", md, [(_fixed(),)], config=config)
        with self.assertLogs("pdfgrid.metadata", level="WARNING"):
            self.assertFalse(read_metadata(path).is_v2)

    def test_unsorted_axes_rejected_when_checked(self) -> None:
        sg = SubGrid.fixed_rank(
            nucleons=[1.0],
            alphas=[0.118],
            kts=[0.0],
            xs=[1.0, 1.0e-2],
            q2s=[1.0, 10.0],
            nflav=1,
            payload=np.zeros(4),
        )
        path = write_container(self.root / "unsorted.npz", MetaData.from_record(RECORD), [(sg,)])
        self.assertEqual(len(read_container(path).subgrids(0)), 1)
        with self.assertRaises(ValueError):
            read_container(path, config=LoadConfig(check_axes_sorted=True))

    def test_invalid_descriptor_in_container(self) -> None:
        md = MetaData.from_record(RECORD)
        path = write_container(self.root / "set.npz", md, [(_fixed(),)])
        with np.load(path) as data:
            arrays = {k: data[k] for k in data.files}
        record = json.loads(str(arrays["metadata"].item()))
        record["SetIndex"] = -4
        arrays["metadata"] = np.array(json.dumps(record))
        np.savez(path, **arrays)

        with self.assertLogs("pdfgrid.schema", level="ERROR"):
            with self.assertRaises(ValidationError):
                read_metadata(path)
        self.assertEqual(read_metadata(path, config=LoadConfig(validate_schema=False)).data.set_index, -4)


class TestDescriptorAndPaths(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_load_descriptor(self) -> None:
        path = self.root / "set.json"
        path.write_text(json.dumps(dict(RECORD, DeltaMin=-0.2, DeltaMax=0.2)), encoding="utf-8")
        md = load_descriptor(path)
        self.assertTrue(md.is_v2)
        self.assertEqual(md.data.delta_max, 0.2)

    def test_load_descriptor_requires_object(self) -> None:
        path = self.root / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_descriptor(path)

    def test_resolve_by_name(self) -> None:
        md = MetaData.from_record(RECORD)
        flat = write_container(self.root / "flat.npz", md, [(_fixed(),)])
        nested = write_container(self.root / "nested" / "nested.npz", md, [(_fixed(),)])
        config = LoadConfig(data_dirs=(self.root,))
        self.assertEqual(resolve_set_path("flat", config=config), flat)
        self.assertEqual(resolve_set_path("nested", config=config), nested)
        self.assertEqual(resolve_set_path("nested.npz", config=config), nested)
        self.assertEqual(resolve_set_path(str(flat), config=config), flat)
        with self.assertRaises(FileNotFoundError):
            resolve_set_path("missing", config=config)

    def test_resolve_from_environment(self) -> None:
        md = MetaData.from_record(RECORD)
        path = write_container(self.root / "envset.npz", md, [(_fixed(),)])
        with mock.patch.dict(os.environ, {"PDFGRID_DATA_PATH": str(self.root)}):
            self.assertEqual(resolve_set_path("envset"), path)


if __name__ == "__main__":
    unittest.main()
