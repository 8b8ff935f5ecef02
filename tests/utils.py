import importlib.util
import itertools
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Tuple

from jsexpr.codegen import TypeChecker, parse_source
from jsexpr.codegen._checker import TypeInfo
from jsexpr.codegen._lib import LIB_PATH, LIB_SOURCE
from jsexpr.codegen._traverse import generate_surrogates

_module_counter = itertools.count()


def make_checker(**sources: str) -> Tuple[TypeChecker, Dict[str, object]]:
    """Bind TypeScript sources, keyed by file stem, into a fresh checker.

    Returns the checker and the parsed source files."""
    checker = TypeChecker()
    checker.bind_source_file(parse_source(LIB_SOURCE, LIB_PATH))
    source_files = {}
    for stem, text in sources.items():
        source_file = parse_source(text, f"{stem}.ts")
        checker.bind_source_file(source_file)
        source_files[stem] = source_file
    return checker, source_files


def declared_type(checker: TypeChecker, name: str) -> TypeInfo:
    """Declared type of a (possibly dotted) class or interface name."""
    symbol = checker.resolve_entity_name(name.split("."), checker.globals)
    assert symbol is not None, f"{name} isn't declared"
    return checker.get_declared_type(symbol)


def write_sources(tmp_path: Path, **sources: str) -> Tuple[Path, ...]:
    """Write TypeScript sources into `tmp_path`, returning their paths."""
    paths = []
    for stem, text in sources.items():
        path = tmp_path / f"{stem}.ts"
        path.write_text(text, encoding="utf-8")
        paths.append(path)
    return tuple(paths)


def import_generated(path: Path) -> ModuleType:
    """Import a generated module from a file.

    The module is registered in `sys.modules` while it executes, which the
    namespace binding of `@generated_code` relies on."""
    name = f"jsexpr_generated_{next(_module_counter)}"
    spec = importlib.util.spec_from_file_location(name, path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


def generate_module(
    tmp_path: Path, base_namespace: str = "App", **sources: str
) -> Tuple[str, ModuleType]:
    """Generate surrogates for some TypeScript sources and import them."""
    text = generate_surrogates(
        write_sources(tmp_path, **sources), base_namespace, "jsexpr", "1.2.3"
    )
    output_path = tmp_path / "surrogates.py"
    output_path.write_text(text, encoding="utf-8")
    return text, import_generated(output_path)
