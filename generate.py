import argparse
import sys
from pathlib import Path

from scaffold.errors import CollectionFormatError, ConfigError
from scaffold.logging_utils import configure_logging
from scaffold.run.config import load_config
from scaffold.run.generator import ScaffoldGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate dataclass models and pytest scaffolds from a Postman collection."
    )
    parser.add_argument("collection", type=Path, help="Path to the collection export (JSON)")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--output-dir", type=Path)
    parser.add_argument("--model-package")
    parser.add_argument("--test-package")
    parser.add_argument("--model-import-package")
    parser.add_argument("--base-url")
    parser.add_argument("--no-accessors", dest="generate_accessors", action="store_false", default=None)
    parser.add_argument("--no-wire-names", dest="wire_name_annotations", action="store_false", default=None)
    parser.add_argument("--no-shared-fixture", dest="generate_shared_fixture", action="store_false", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    overrides = {
        "output_dir": args.output_dir,
        "model_package": args.model_package,
        "test_package": args.test_package,
        "model_import_package": args.model_import_package,
        "base_url": args.base_url,
        "generate_accessors": args.generate_accessors,
        "wire_name_annotations": args.wire_name_annotations,
        "generate_shared_fixture": args.generate_shared_fixture,
    }

    try:
        config = load_config(args.config, overrides=overrides)
    except (ConfigError, FileNotFoundError) as e:
        print(f"❌ Error: {e}")
        return 1

    print(f"🔍 Reading {args.collection}...")
    try:
        result = ScaffoldGenerator(config).run_file(args.collection)
    except (CollectionFormatError, FileNotFoundError) as e:
        print(f"❌ Error: {e}")
        return 1
    except OSError as e:
        print(f"❌ Could not write output under {config.output_dir}: {e}")
        return 1

    for warning in result.diagnostics:
        print(f"⚠️ Warning: {warning}")
    print(f"✨ Created {len(result.schemas)} models and {len(result.groups)} test modules in {config.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
