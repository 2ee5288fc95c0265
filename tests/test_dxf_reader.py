"""Tests for DXF decoding and the dxf-to-gcode command line."""
import unittest
import io
import tempfile
import os
import sys
from contextlib import redirect_stdout, redirect_stderr

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import ezdxf

from dxf_print_postprocessor import SPLINE_NOTICE, EntityKind
from dxf_reader import entities_from_document, read_entities
from dxf_to_gcode import main
from print_geometry import Point


def make_document():
    """Drawing with one of each entity kind the reader cares about"""
    doc = ezdxf.new()
    msp = doc.modelspace()
    msp.add_polyline3d([(0, 0, 5), (10, 0, 2), (10, 20, 0)])
    msp.add_spline([(0, 0, 0), (1, 2, 0), (3, 1, 0), (4, 4, 0)])
    msp.add_lwpolyline([(1, 1), (2, 1), (2, 2)], dxfattribs={'elevation': 3.0})
    msp.add_line((0, 0, 0), (1, 1, 0))
    msp.add_circle((0, 0), 5)
    return doc


class TestEntitiesFromDocument(unittest.TestCase):

    def setUp(self):
        self.entities = entities_from_document(make_document())

    def test_kinds_in_drawing_order(self):
        kinds = [e.kind for e in self.entities]
        self.assertEqual(kinds, [EntityKind.POLYLINE, EntityKind.SPLINE, EntityKind.POLYLINE,
                                 EntityKind.OTHER, EntityKind.OTHER])

    def test_polyline3d_vertices(self):
        self.assertEqual(self.entities[0].vertices,
                         [Point(0, 0, 5), Point(10, 0, 2), Point(10, 20, 0)])
        self.assertEqual(self.entities[0].dxftype, 'POLYLINE')

    def test_lwpolyline_uses_elevation_as_z(self):
        self.assertEqual(self.entities[2].vertices,
                         [Point(1, 1, 3), Point(2, 1, 3), Point(2, 2, 3)])

    def test_lwpolyline_coordinates_are_plain_floats(self):
        for point in self.entities[2].vertices:
            self.assertEqual([type(c) for c in point], [float, float, float])

    def test_polyline2d_uses_elevation_as_z(self):
        doc = ezdxf.new()
        doc.modelspace().add_polyline2d([(0, 0), (1, 0)], dxfattribs={'elevation': (0, 0, 7)})
        entities = entities_from_document(doc)
        self.assertEqual(entities[0].vertices, [Point(0, 0, 7), Point(1, 0, 7)])

    def test_polyline2d_and_lwpolyline_decode_alike(self):
        doc = ezdxf.new()
        msp = doc.modelspace()
        msp.add_polyline2d([(0, 0), (4, 2)], dxfattribs={'elevation': (0, 0, 1.5)})
        msp.add_lwpolyline([(0, 0), (4, 2)], dxfattribs={'elevation': 1.5})
        polyline2d, lwpolyline = entities_from_document(doc)
        self.assertEqual(polyline2d.vertices, lwpolyline.vertices)

    def test_spline_has_no_vertices(self):
        self.assertEqual(self.entities[1].vertices, [])
        self.assertEqual(self.entities[1].dxftype, 'SPLINE')

    def test_polyface_is_not_a_path(self):
        doc = ezdxf.new()
        polyface = doc.modelspace().add_polyface()
        polyface.append_face([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
        entities = entities_from_document(doc)
        self.assertEqual([e.kind for e in entities], [EntityKind.OTHER])


class TestReadEntities(unittest.TestCase):

    def test_missing_file_raises_ioerror(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(IOError):
                read_entities('/nonexistent/part.dxf')

    def test_reads_saved_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'part.dxf')
            make_document().saveas(path)
            with redirect_stdout(io.StringIO()):
                entities = read_entities(path)
        self.assertEqual(len(entities), 5)


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dxf_path = os.path.join(self.tmp.name, 'part.dxf')
        make_document().saveas(self.dxf_path)

    def tearDown(self):
        self.tmp.cleanup()

    def _main(self, argv):
        stdout = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
            code = main(argv)
        return code, stdout.getvalue()

    def test_default_output_path(self):
        code, stdout = self._main([self.dxf_path])
        self.assertEqual(code, 0)
        output_path = self.dxf_path + '.gcode'
        self.assertTrue(os.path.exists(output_path))
        self.assertIn(f"G-code written to {output_path}", stdout)
        self.assertEqual(stdout.count(SPLINE_NOTICE), 1)
        self.assertIn("PRINT INFO:", stdout)
        self.assertIn("X min: 0.000000; X max: 10.000000", stdout)

    def test_options_reach_output(self):
        output_path = os.path.join(self.tmp.name, 'out.gcode')
        code, _ = self._main(['-E', '2', '-F', '1500', '--center-x', '100', '--center-y', '100',
                              '-o', output_path, self.dxf_path])
        self.assertEqual(code, 0)
        with open(output_path) as f:
            lines = f.read().splitlines()
        self.assertEqual(lines[0], "G21 ;metric values")
        self.assertEqual(lines[3], "G1 F1500.000000")
        # Polyline 3D descends (5 -> 0) so it is printed from its last vertex
        # Bounds X 0..10, Y 0..20 -> shift (95, 90)
        self.assertEqual(lines[4], "G1 X105.000000 Y110.000000 Z0.000000")
        self.assertEqual(lines[5], "G1 X105.000000 Y90.000000 Z2.000000 E40.199502")

    def test_config_file_values_are_used(self):
        config_path = os.path.join(self.tmp.name, 'printer.yaml')
        with open(config_path, 'w') as f:
            f.write("motion:\n  feed_rate: 600\n")
        output_path = os.path.join(self.tmp.name, 'out.gcode')
        code, _ = self._main(['--config', config_path, '-o', output_path, self.dxf_path])
        self.assertEqual(code, 0)
        with open(output_path) as f:
            self.assertIn("G1 F600.000000", f.read())

    def test_command_line_overrides_config(self):
        config_path = os.path.join(self.tmp.name, 'printer.yaml')
        with open(config_path, 'w') as f:
            f.write("motion:\n  feed_rate: 600\n")
        output_path = os.path.join(self.tmp.name, 'out.gcode')
        self._main(['--config', config_path, '-F', '900', '-o', output_path, self.dxf_path])
        with open(output_path) as f:
            text = f.read()
        self.assertIn("G1 F900.000000", text)
        self.assertNotIn("G1 F600.000000", text)

    def test_missing_input_fails_without_output(self):
        missing = os.path.join(self.tmp.name, 'missing.dxf')
        code, _ = self._main([missing])
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(missing + '.gcode'))

    def test_malformed_input_fails(self):
        bad_path = os.path.join(self.tmp.name, 'bad.dxf')
        with open(bad_path, 'w') as f:
            f.write("this is not a drawing\n")
        code, _ = self._main([bad_path])
        self.assertEqual(code, 1)

    def test_unwritable_output_fails(self):
        output_path = os.path.join(self.tmp.name, 'no_such_dir', 'out.gcode')
        code, _ = self._main(['-o', output_path, self.dxf_path])
        self.assertEqual(code, 1)

    def test_no_input_is_usage_error(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                main([])
        self.assertEqual(cm.exception.code, 2)

    def test_write_config_template(self):
        config_path = os.path.join(self.tmp.name, 'template.yaml')
        code, _ = self._main(['--write-config', config_path])
        self.assertEqual(code, 0)
        with open(config_path) as f:
            self.assertIn("profiles:", f.read())

    def test_unknown_profile_is_usage_error(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                main(['--profile', 'nope', self.dxf_path])
        self.assertEqual(cm.exception.code, 2)

    def _main_with_config(self, text):
        config_path = os.path.join(self.tmp.name, 'printer.yaml')
        with open(config_path, 'w') as f:
            f.write(text)
        stderr = io.StringIO()
        with redirect_stdout(io.StringIO()), redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as cm:
                main(['--config', config_path, self.dxf_path])
        return cm.exception.code, stderr.getvalue()

    def test_profiles_list_is_usage_error(self):
        code, stderr = self._main_with_config("default_profile: a\nprofiles: [a, b]\n")
        self.assertEqual(code, 2)
        self.assertIn("profiles", stderr)
        self.assertFalse(os.path.exists(self.dxf_path + '.gcode'))

    def test_non_numeric_setting_is_usage_error(self):
        code, stderr = self._main_with_config("motion:\n  feed_rate: fast\n")
        self.assertEqual(code, 2)
        self.assertIn("motion.feed_rate", stderr)
        self.assertFalse(os.path.exists(self.dxf_path + '.gcode'))


if __name__ == '__main__':
    unittest.main()
