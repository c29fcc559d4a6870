import shutil
import tempfile
from pathlib import Path


def before_scenario(context, scenario):
    # Fresh output root and run result per scenario
    context.output_dir = Path(tempfile.mkdtemp(prefix="scaffold-"))
    context.collection = None
    context.config_overrides = {}
    context.result = None
    context.error = None


def after_scenario(context, scenario):
    shutil.rmtree(context.output_dir, ignore_errors=True)
