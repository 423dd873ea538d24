"""
Image Budget
Fit images into a byte and dimension budget with a bounded quality search.
"""

import argparse
import logging
import sys
import warnings

warnings.filterwarnings('ignore', category=RuntimeWarning)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNSATISFIABLE = 2


def build_parser() -> argparse.ArgumentParser:
    from models.compression_budget import PRESETS
    from engines import CODECS

    parser = argparse.ArgumentParser(
        prog="main.py --cli",
        description="Re-encode an image so it fits a size and dimension budget.",
    )
    parser.add_argument("input", nargs="?", help="image file to compress")
    parser.add_argument("--synthetic", choices=["noise", "gradient", "checkerboard", "photo"],
                        help="use a generated image instead of a file")
    parser.add_argument("--size", type=int, default=2048,
                        help="long edge of the synthetic image (default: 2048)")
    parser.add_argument("-o", "--output", default=None, help="output path (default: compressed.<ext>)")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="default")
    parser.add_argument("--max-bytes", type=int, default=None)
    parser.add_argument("--max-dimension", type=int, default=None)
    parser.add_argument("--quality", type=int, default=None, help="initial quality 1-100")
    parser.add_argument("--codec", choices=sorted(CODECS), default=None)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def run_cli(argv=None) -> int:
    """Run CLI mode; returns the process exit code."""
    from models.compression_budget import get_preset
    from models.errors import BudgetUnsatisfiable, CompressionError
    from engines import compress, get_codec
    from engines.compressor import clamp_to_budget
    from utils.image_io import read_bytes, write_bytes, encode_png
    from utils.metrics import measure_fidelity
    from utils.settings import load_settings
    from utils.test_images import generate_demo_image

    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return EXIT_ERROR

    level = logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else settings.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.synthetic:
        print(f"Generating {args.synthetic} image...")
        width = args.size
        height = max(1, args.size * 2 // 3)
        data = encode_png(generate_demo_image(args.synthetic, width, height))
    elif args.input:
        print(f"Loading: {args.input}")
        try:
            data = read_bytes(args.input)
        except OSError as e:
            print(f"Cannot read input: {e}", file=sys.stderr)
            return EXIT_ERROR
    else:
        build_parser().print_usage()
        return EXIT_ERROR

    try:
        budget = get_preset(args.preset).with_overrides(
            max_output_bytes=args.max_bytes,
            max_dimension=args.max_dimension,
            initial_quality=args.quality,
        )
    except CompressionError as e:
        print(f"Invalid budget: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        codec = get_codec(args.codec or settings.codec)
        policy = settings.search_policy()
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(f"Input:   {len(data)} bytes")
    print(f"Budget:  {budget.max_output_bytes} bytes, {budget.max_dimension}px, q={budget.initial_quality}")
    print(f"Codec:   {codec.name}")

    exit_code = EXIT_OK
    try:
        result = compress(data, budget, codec, policy)
    except BudgetUnsatisfiable as e:
        print(f"\nBudget not met: {e}", file=sys.stderr)
        result = e.best_effort
        exit_code = EXIT_UNSATISFIABLE
    except CompressionError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_ERROR

    output = args.output or f"compressed.{_extension(codec.name)}"
    write_bytes(result.data, output)

    # compare against the clamped buffer so fallback sizes round the same way
    reference = clamp_to_budget(codec, codec.decode(data), budget.max_dimension)
    fidelity = measure_fidelity(reference, result, codec)

    print("\n=== Results ===")
    print(f"Size:      {result.size} bytes ({result.size / max(len(data), 1):.1%} of input)")
    print(f"Dims:      {result.width}x{result.height}")
    print(f"Quality:   {result.quality}")
    print(f"Attempts:  {result.attempts}")
    print(f"PSNR:      {fidelity.psnr:.2f} dB")
    print(f"SSIM:      {fidelity.ssim:.4f}")

    print(f"\nSaved: {output}")
    return exit_code


def _extension(codec_name: str) -> str:
    if codec_name.endswith("webp"):
        return "webp"
    if codec_name == "dct":
        return "bdct"
    return "jpg"


def main():
    if len(sys.argv) > 1 and sys.argv[1] == '--cli':
        sys.exit(run_cli(sys.argv[2:]))
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == '__main__':
    main()
