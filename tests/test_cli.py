"""
Tests for cli -- stackedled command-line interface argument parsing and dispatch.

Tests cover:
- main() with no args prints help, --version
- render writes a PNG of the requested size
- plan prints text, JSON and paint-call (--ops) output
- gui dispatch and missing PySide6 handling
- Invalid options and missing presets exit with status 1
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from PIL import Image

from stackedled.cli import _parse_size, build_parser, main


class CLITestCase(unittest.TestCase):
    """Runs main() with the user preset pointed at an empty directory."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        patcher = patch('stackedled.conf.PRESET_PATH',
                        os.path.join(self.tmp.name, 'missing.json'))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)

    def run_main(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()


class TestMain(CLITestCase):
    """Test main() CLI dispatch."""

    def test_no_args_prints_help(self):
        code, out = self.run_main()
        self.assertEqual(code, 0)
        self.assertIn('usage', out)

    def test_version_flag(self):
        with self.assertRaises(SystemExit) as cm, redirect_stdout(io.StringIO()):
            main(['--version'])
        self.assertEqual(cm.exception.code, 0)

    def test_gui_dispatches(self):
        with patch('stackedled.cli.gui', return_value=0) as mock_gui:
            code, _ = self.run_main('gui', '--sweep', '--bars', '12')
        self.assertEqual(code, 0)
        svc = mock_gui.call_args[0][0]
        self.assertEqual(svc.config.num_bars, 12)
        self.assertTrue(mock_gui.call_args[1]['sweep'])

    def test_gui_runs_app(self):
        with patch('stackedled.qt_components.qt_app.run_app', return_value=0) as mock_run:
            code, _ = self.run_main('gui', '--value', '0.4')
        self.assertEqual(code, 0)
        self.assertEqual(mock_run.call_args[0][0].value, 0.4)

    def test_gui_keeps_held_peak(self):
        with patch('stackedled.qt_components.qt_app.run_app', return_value=0) as mock_run:
            self.run_main('gui', '--hold-peak', '--value', '0.95', '0.25')
        derived = mock_run.call_args[1]['derived']
        self.assertEqual(derived.peak_bar_idx, 9)
        self.assertEqual(derived.off_idx, 2)

    def test_gui_without_pyside(self):
        with patch.dict('sys.modules', {'stackedled.qt_components.qt_app': None}):
            code, out = self.run_main('gui')
        self.assertEqual(code, 1)
        self.assertIn('PySide6', out)


class TestRender(CLITestCase):

    def test_render_png(self):
        path = os.path.join(self.tmp.name, 'meter.png')
        code, out = self.run_main('render', path, '--value', '0.65', '--size', '30x120')
        self.assertEqual(code, 0)
        self.assertIn('Saved 30x120', out)
        with Image.open(path) as img:
            self.assertEqual(img.size, (30, 120))

    def test_render_into_missing_dir(self):
        path = os.path.join(self.tmp.name, 'a', 'b', 'meter.png')
        code, _ = self.run_main('render', path)
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(path))


class TestPlan(CLITestCase):

    def test_text_plan(self):
        code, out = self.run_main('plan', '--value', '0.65')
        self.assertEqual(code, 0)
        self.assertIn('vertical 40x200, bar size 20', out)
        self.assertIn('on=0 off=6', out)

    def test_json_plan(self):
        code, out = self.run_main('plan', '--json', '--value', '0.65', '--bars', '20',
                                  '--size', '300x30')
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data['orientation'], 'horizontal')
        self.assertEqual(data['bar_size'], 15)
        self.assertEqual(data['derived']['off_idx'], 13)
        self.assertEqual(len(data['segments']), 20)
        self.assertEqual(data['segments'][0]['style'], 'gradient')
        self.assertEqual(data['segments'][19]['style'], 'unlit')

    def test_ops(self):
        code, out = self.run_main('plan', '--ops', '--bars', '4', '--size', '20x40')
        self.assertEqual(code, 0)
        lines = out.splitlines()
        # background, 6 calls per unlit segment, outer border
        self.assertEqual(len(lines), 26)
        self.assertEqual(lines[0], 'fill_rect (0,0 20x40) #000000ff')
        self.assertEqual(lines[-1], 'stroke_rect (1,1 18x38) #808080ff 2')

    def test_ops_gradient(self):
        code, out = self.run_main('plan', '--ops', '--bars', '2', '--size', '20x40', '--value', '1')
        grads = [line for line in out.splitlines() if line.startswith('fill_radial_gradient')]
        self.assertEqual(len(grads), 2)
        self.assertIn('[0:#00ff00ff 0.5:#00', grads[0])

    def test_values_applied_in_order(self):
        code, out = self.run_main('plan', '--json', '--hold-peak', '--value', '0.95', '0.25')
        data = json.loads(out)
        self.assertEqual(data['derived']['off_idx'], 2)
        self.assertEqual(data['derived']['peak_bar_idx'], 9)

    def test_flags(self):
        code, out = self.run_main('plan', '--json', '--solid', '--reverse', '--value', '1')
        data = json.loads(out)
        self.assertFalse(data['config']['lit_effect'])
        self.assertTrue(data['config']['reverse_direction'])
        self.assertEqual(data['segments'][0]['style'], 'solid')
        self.assertEqual(data['segments'][0]['rect'][1], 0)

    def test_preset_file(self):
        path = os.path.join(self.tmp.name, 'p.json')
        with open(path, 'w') as f:
            json.dump({'numBars': 5, 'normalColor': '#0000ff'}, f)
        code, out = self.run_main('plan', '--json', '--preset', path, '--value', '0.1')
        data = json.loads(out)
        self.assertEqual(data['config']['num_bars'], 5)
        self.assertEqual(data['segments'][0]['color'], '#0000ffff')

    def test_override_beats_preset(self):
        path = os.path.join(self.tmp.name, 'p.json')
        with open(path, 'w') as f:
            json.dump({'num_bars': 5}, f)
        code, out = self.run_main('plan', '--json', '--preset', path, '--bars', '8')
        self.assertEqual(json.loads(out)['config']['num_bars'], 8)

    def test_user_preset_loaded(self):
        path = os.path.join(self.tmp.name, 'preset.json')
        with open(path, 'w') as f:
            json.dump({'numBars': 4}, f)
        with patch('stackedled.conf.PRESET_PATH', path):
            code, out = self.run_main('plan', '--json')
        self.assertEqual(json.loads(out)['config']['num_bars'], 4)


class TestErrors(CLITestCase):

    def test_zero_bars(self):
        code, out = self.run_main('plan', '--bars', '0')
        self.assertEqual(code, 1)
        self.assertIn('Error', out)

    def test_missing_preset(self):
        code, out = self.run_main('plan', '--preset', os.path.join(self.tmp.name, 'nope.json'))
        self.assertEqual(code, 1)
        self.assertIn('Preset not found', out)

    def test_bad_preset_color(self):
        path = os.path.join(self.tmp.name, 'p.json')
        with open(path, 'w') as f:
            json.dump({'dangerColor': 'crimson'}, f)
        code, _ = self.run_main('plan', '--preset', path)
        self.assertEqual(code, 1)


class TestParser(unittest.TestCase):

    def test_parse_size(self):
        self.assertEqual(_parse_size('40x200'), (40, 200))
        self.assertEqual(_parse_size('300X30'), (300, 30))

    def test_bad_size_exits(self):
        parser = build_parser()
        with self.assertRaises(SystemExit), patch('sys.stderr', io.StringIO()):
            parser.parse_args(['plan', '--size', '0x10'])
        with self.assertRaises(SystemExit), patch('sys.stderr', io.StringIO()):
            parser.parse_args(['plan', '--size', 'big'])

    def test_defaults_leave_config_untouched(self):
        args = build_parser().parse_args(['plan'])
        self.assertIsNone(args.hold_peak)
        self.assertIsNone(args.lit_effect)
        self.assertIsNone(args.num_bars)
        self.assertEqual(args.size, (40, 200))


if __name__ == '__main__':
    unittest.main()
