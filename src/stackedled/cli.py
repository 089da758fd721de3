#!/usr/bin/env python3
"""
Stacked LED - Command Line Interface

Entry point for the stackedled package.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from stackedled.__version__ import __version__
from stackedled.conf import config_from_options, config_to_dict, load_preset
from stackedled.core.models import Color, ConfigError, RadialGradient, Rect
from stackedled.core.surface import RecordingSurface
from stackedled.services.meter import MeterService


def _setup_logging(verbose=0):
    """Set up logging based on verbosity (filter out noisy PIL)."""
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format='[%(levelname)s] %(name)s: %(message)s')
        logging.getLogger('PIL').setLevel(logging.WARNING)
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING)


def _parse_size(text):
    """'40x200' -> (40, 200)."""
    try:
        w, h = text.lower().split('x')
        size = (int(w), int(h))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid size {text!r}, expected WIDTHxHEIGHT") from None
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {text!r}")
    return size


def _meter_options_parser():
    """Options shared by every subcommand."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--preset", "-p", help="JSON preset file (default: ~/.config/stackedled/preset.json)")
    parent.add_argument("--value", type=float, nargs="+",
                        help="Value(s) to apply in order (later values update peak hold)")
    parent.add_argument("--min", dest="min_limit", type=float, help="Lowest value (min_limit)")
    parent.add_argument("--max", dest="max_limit", type=float, help="Highest value (max_limit)")
    parent.add_argument("--bars", dest="num_bars", type=int, help="Number of segments")
    parent.add_argument("--warn", dest="warn_threshold", type=float, help="Warning zone start (fraction)")
    parent.add_argument("--danger", dest="danger_threshold", type=float, help="Danger zone start (fraction)")
    parent.add_argument("--hold-peak", dest="hold_peak", action="store_true", default=None,
                        help="Keep the highest segment lit")
    parent.add_argument("--solid", dest="lit_effect", action="store_false", default=None,
                        help="Solid fill instead of radial gradient")
    parent.add_argument("--reverse", dest="reverse_direction", action="store_true", default=None,
                        help="Grow top-to-bottom / right-to-left")
    parent.add_argument("--size", type=_parse_size, default=(40, 200),
                        help="Viewport as WIDTHxHEIGHT (default 40x200)")
    return parent


OVERRIDE_OPTIONS = (
    'min_limit', 'max_limit', 'num_bars', 'warn_threshold',
    'danger_threshold', 'hold_peak', 'lit_effect', 'reverse_direction',
)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stackedled",
        description="Segmented LED-bar meter renderer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    stackedled render meter.png --value 0.65
    stackedled render meter.png --value 0.9 0.3 --hold-peak --size 300x30
    stackedled plan --value 0.65 --bars 20
    stackedled plan --json --preset mypreset.json
    stackedled plan --ops --bars 4 --size 20x40
    stackedled gui --sweep --hold-peak
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v, -vv)")

    common = _meter_options_parser()
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", parents=[common], help="Render meter to PNG")
    render_parser.add_argument("output", help="Output PNG path")

    plan_parser = subparsers.add_parser("plan", parents=[common], help="Print the segment draw plan")
    plan_parser.add_argument("--json", action="store_true", help="Print plan as JSON")
    plan_parser.add_argument("--ops", action="store_true",
                             help="Print the drawing calls of one paint pass")

    gui_parser = subparsers.add_parser("gui", parents=[common], help="Open the demo window")
    gui_parser.add_argument("--sweep", action="store_true", help="Animate the value")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        svc = build_service(args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}")
        return 1

    if args.command == "render":
        return render(svc, args.output, args.size)
    elif args.command == "plan":
        if args.ops:
            return show_ops(svc, args.size)
        return show_plan(svc, args.size, as_json=args.json)
    elif args.command == "gui":
        return gui(svc, sweep=args.sweep)
    return 0


def build_service(args):
    """MeterService configured from preset, overrides and values.

    Raises:
        ConfigError: invalid option value.
        FileNotFoundError: explicit --preset file does not exist.
    """
    if args.preset:
        if not Path(args.preset).is_file():
            raise FileNotFoundError(f"Preset not found: {args.preset}")
        options = load_preset(args.preset)
    else:
        options = load_preset()

    for name in OVERRIDE_OPTIONS:
        value = getattr(args, name, None)
        if value is not None:
            options[name] = value

    svc = MeterService(config_from_options(options))
    for value in args.value or ():
        svc.set_value(value)
    return svc


def render(svc, output, size):
    """Render the meter to a PNG file."""
    from stackedled.services.image import ImageService

    try:
        image = ImageService.render(svc.config, svc.derived, size)
        path = ImageService.save_png(image, output)
    except OSError as e:
        print(f"Error: {e}")
        return 1
    print(f"Saved {size[0]}x{size[1]} meter to {path}")
    return 0


def plan_to_dict(svc, plan):
    """JSON-ready summary of a draw plan plus the derived indices."""
    d = svc.derived
    return {
        "config": config_to_dict(svc.config),
        "derived": {
            "on_idx": d.on_idx,
            "off_idx": d.off_idx,
            "peak_bar_idx": d.peak_bar_idx,
            "warning_bar_idx": d.warning_bar_idx,
            "danger_bar_idx": d.danger_bar_idx,
        },
        "orientation": plan.orientation.name.lower(),
        "bar_size": plan.bar_size,
        "bounds": [plan.bounds.x, plan.bounds.y, plan.bounds.width, plan.bounds.height],
        "segments": [
            {
                "index": seg.index,
                "rect": [seg.rect.x, seg.rect.y, seg.rect.width, seg.rect.height],
                "lit": seg.lit,
                "style": seg.style.name.lower(),
                "color": seg.color.to_hex(),
            }
            for seg in plan.segments
        ],
    }


def show_plan(svc, size, as_json=False):
    """Print the draw plan for a viewport of the given size."""
    plan = svc.plan(Rect(0, 0, size[0], size[1]))
    if as_json:
        print(json.dumps(plan_to_dict(svc, plan), indent=2))
        return 0

    d = svc.derived
    print(f"{plan.orientation.name.lower()} {size[0]}x{size[1]}, bar size {plan.bar_size}")
    print(f"on={d.on_idx} off={d.off_idx} peak={d.peak_bar_idx} "
          f"warn={d.warning_bar_idx} danger={d.danger_bar_idx}")
    for seg in plan.segments:
        r = seg.rect
        state = seg.style.name.lower()
        print(f"  [{seg.index:3d}] x={r.x:<4g} y={r.y:<4g} {r.width:g}x{r.height:g} "
              f"{state:<8} {seg.color.to_hex()}")
    return 0


def _format_arg(arg):
    if isinstance(arg, Rect):
        return f"({arg.x:g},{arg.y:g} {arg.width:g}x{arg.height:g})"
    if isinstance(arg, Color):
        return arg.to_hex()
    if isinstance(arg, RadialGradient):
        cx, cy = arg.center
        stops = " ".join(f"{loc:g}:{clr.to_hex()}" for loc, clr in arg.stops)
        return f"radial@({cx:g},{cy:g}) r={arg.end_radius:.2f} [{stops}]"
    return f"{arg:g}" if isinstance(arg, float) else str(arg)


def show_ops(svc, size):
    """Print every drawing call of one paint pass, in order."""
    surface = RecordingSurface()
    svc.paint(surface, Rect(0, 0, size[0], size[1]))
    for op in surface.ops:
        print(" ".join([op[0]] + [_format_arg(a) for a in op[1:]]))
    return 0


def gui(svc, sweep=False):
    """Launch the demo window."""
    try:
        from stackedled.qt_components.qt_app import run_app
    except ImportError as e:
        print(f"Error: PySide6 not available: {e}")
        print("Install with: pip install PySide6")
        return 1
    return run_app(svc.config, sweep=sweep, derived=svc.derived)


if __name__ == "__main__":
    sys.exit(main())
