# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import argparse
import math

from .definitions import lookup, format_definition
from .elements import OrbitalElements, DEFAULT_ELEMENTS, DEFAULT_RESOLUTION, check_elements
# ------------------------------------------------------------------------------------------------ #


def build_parser() -> argparse.ArgumentParser:
    e, a, omega, inc, raan = DEFAULT_ELEMENTS.as_tuple()
    parser = argparse.ArgumentParser(
        prog='keplerviz',
        description='Interactive 3D visualizer for Keplerian orbital elements.',
    )
    parser.add_argument('--eccentricity', '-e', type=float, default=e)
    parser.add_argument('--semi-major-axis', '-a', type=float, default=a)
    parser.add_argument('--periapsis-argument', type=float, default=math.degrees(omega), help='degrees')
    parser.add_argument('--inclination', type=float, default=math.degrees(inc), help='degrees')
    parser.add_argument('--longitude', type=float, default=math.degrees(raan),
                        help='longitude of the ascending node, degrees')
    parser.add_argument('--true-anomaly', type=float, default=0.0, help='degrees')
    parser.add_argument('--resolution', type=float, default=DEFAULT_RESOLUTION,
                        help='true anomaly step between orbit samples, radians')
    parser.add_argument('--no-rotate', action='store_true', help='keep the camera still')
    parser.add_argument('--save', metavar='PATH', help='write a GIF of one camera turn instead of opening a window')
    parser.add_argument('--frames', type=int, default=120, help='number of frames written by --save')
    parser.add_argument('--define', metavar='TERM', help='print the definition of an orbital element and exit')
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.define is not None:
        try:
            print(format_definition(lookup(args.define)))
        except KeyError as err:
            parser.error(err.args[0])
        return 0

    try:
        elements = check_elements(OrbitalElements.from_degrees(
            args.eccentricity,
            args.semi_major_axis,
            args.periapsis_argument,
            args.inclination,
            args.longitude,
        ))
    except (TypeError, ValueError) as err:
        parser.error(str(err))
    if not args.resolution > 0:
        parser.error("Resolution must be strictly positive.")

    # Imported here so that --define works without a display backend
    import matplotlib
    if args.save is not None:
        matplotlib.use('Agg')
    from .scene import SceneAdapter
    from .visualizer import OrbitVisualizer

    adapter = SceneAdapter(
        elements=elements,
        true_anomaly=math.radians(args.true_anomaly),
        resolution=args.resolution,
        verbose=args.verbose,
    )
    visualizer = OrbitVisualizer(adapter, auto_rotate=not args.no_rotate, verbose=args.verbose)

    if args.save is not None:
        visualizer.save_animation(args.save, n_frames=args.frames, verbose=True)
    else:
        visualizer.show()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
