import json

from behave import given, when, then

from scaffold.errors import CollectionFormatError
from scaffold.run.config import GeneratorConfig
from scaffold.run.generator import ScaffoldGenerator

_BOOL_TRUE = {"true", "1", "yes", "y", "on"}


def _names(text: str) -> list[str]:
    return [n.strip() for n in text.split(",") if n.strip()]


@given("the collection:")
def step_collection(context):
    context.collection = json.loads(context.text)


@given("the generator is configured with:")
def step_configure(context):
    for row in context.table:
        key = row[0].strip()
        value = row[1].strip()
        if value.lower() in _BOOL_TRUE | {"false", "0", "no", "n", "off"}:
            context.config_overrides[key] = value.lower() in _BOOL_TRUE
        else:
            context.config_overrides[key] = value


@when("I generate scaffolds")
def step_generate(context):
    config = GeneratorConfig(output_dir=context.output_dir, **context.config_overrides)
    try:
        context.result = ScaffoldGenerator(config).run(context.collection)
    except CollectionFormatError as e:
        context.error = e


@then('the models "{names}" are generated')
def step_models(context, names):
    expected = _names(names)
    if context.result.schema_names != expected:
        raise AssertionError(f"Expected models {expected}, got {context.result.schema_names}")


@then('the resource groups are "{names}"')
def step_groups(context, names):
    actual = [g.name for g in context.result.groups]
    if actual != _names(names):
        raise AssertionError(f"Expected groups {_names(names)}, got {actual}")


@then('the file "{relative}" exists')
def step_file_exists(context, relative):
    p = context.output_dir / relative
    if not p.exists():
        raise AssertionError(f"Expected generated file not found: {p}")


@then('the file "{relative}" does not exist')
def step_file_missing(context, relative):
    p = context.output_dir / relative
    if p.exists():
        raise AssertionError(f"Unexpected generated file: {p}")


@then('the file "{relative}" contains "{snippet}"')
def step_file_contains(context, relative, snippet):
    text = (context.output_dir / relative).read_text(encoding="utf-8")
    if snippet not in text:
        raise AssertionError(f"{relative} does not contain {snippet!r}")


@then("the run reports {count:d} diagnostics")
def step_diagnostics(context, count):
    if len(context.result.diagnostics) != count:
        raise AssertionError(f"Expected {count} diagnostics, got {context.result.diagnostics}")


@then("the run is aborted")
def step_aborted(context):
    if context.error is None:
        raise AssertionError("Expected the run to abort")
