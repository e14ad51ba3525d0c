"""Typer-based CLI for asmcc."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from .editor import WorkingSnippet, edit_file, resolve_editor
from .environment import EnvironmentReport, detect_environment
from .errors import UserAbort
from .options import DEFAULT_WARNINGS, CompilerConfig, Language, OptimizationLevel, default_include_directories
from .session import RetryLoop, ask_yes_no
from .state import build_state
from .templates import select_template

app = typer.Typer(add_completion=False, context_settings={"help_option_names": ["-h", "--help"]})
console = Console()
err_console = Console(stderr=True)


def _split_lists(values: Optional[Iterable[str]]) -> list[str]:
    """Flatten repeated, comma-separated option values (``-D A,B -D C``)."""
    items: list[str] = []
    for value in values or ():
        items.extend(part for part in value.split(",") if part.strip())
    return items


def _confirm(prompt: str, default: bool) -> bool:
    """Ask on stderr; a closed stdin counts as "no"."""
    try:
        return ask_yes_no(prompt, default, read=lambda text: err_console.input(text, markup=False))
    except EOFError:
        err_console.print()
        return False


@app.command("compile")
def compile_snippet(
    opt_level: OptimizationLevel = typer.Option(OptimizationLevel.O3, "--opt-level", "-O", help="Optimization level."),
    lang: Language = typer.Option(Language.CPP, "--lang", "-l", help="Source language."),
    std: Optional[str] = typer.Option(
        None, "--std", "-s", help="Language standard. Defaults to c++1y for c++/objc++, c11 for c/objc."
    ),
    emit_llvm: bool = typer.Option(False, "--emit-llvm", "-L", help="Emit LLVM IR (disables --show-encoding)."),
    fast_math: bool = typer.Option(
        False, "--fast-math/--no-fast-math", "-F", help="Prefer speed to accuracy for floating point."
    ),
    arch: str = typer.Option("native", "--arch", "-a", help="Value for -march."),
    m32: bool = typer.Option(False, "--m32", help="Force 32 bit compilation."),
    m64: bool = typer.Option(False, "--m64", help="Force 64 bit compilation."),
    xcc: Optional[List[str]] = typer.Option(None, "--Xcc", "-X", help="Extra compiler flags (comma separated)."),
    exceptions: bool = typer.Option(False, "--exceptions/--no-exceptions", "-e", help="Enable exceptions."),
    rtti: bool = typer.Option(False, "--rtti/--no-rtti", "-r", help="Enable runtime type info."),
    edit_result: bool = typer.Option(False, "--edit-result", "-E", help="Open the result in the editor."),
    verbose_asm: bool = typer.Option(True, "--verbose-asm/--no-verbose-asm", help="Verbose assembly output."),
    define: Optional[List[str]] = typer.Option(None, "--define", "-D", help="Macros to define (comma separated)."),
    undef: Optional[List[str]] = typer.Option(
        None, "--undef", "-U", help="Macros to undefine, overrides --define (comma separated)."
    ),
    warn: Optional[List[str]] = typer.Option(
        None, "--warn", "-W", help="Warnings to enable, replacing the default Wall,Weffc++ (comma separated)."
    ),
    include: Optional[List[str]] = typer.Option(
        None, "--include", "-I", help="Extra include directories (comma separated)."
    ),
    show_encoding: bool = typer.Option(False, "--show-encoding", "-S", help="Annotate instruction encodings."),
    combined_output: bool = typer.Option(
        False, "--combined-output", "-C", help="Output the source followed by the generated code."
    ),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write output to FILE instead of stdout."),
    input_path: Optional[Path] = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Compile FILE instead of opening the editor."
    ),
    template: Optional[Path] = typer.Option(None, "--template", "-T", help="Use FILE as the starting snippet."),
    demangle: bool = typer.Option(True, "--demangle/--no-demangle", help="Demangle C++ identifiers with c++filt."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Pass -v to the compiler."),
    debug_info: bool = typer.Option(False, "--debug-info", "-g", help="Include debugging info."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config TOML"),
) -> None:
    """Compile a snippet and print the generated assembly."""

    if m32 and m64:
        raise typer.BadParameter("--m32 and --m64 are mutually exclusive")

    state = build_state(config_path)

    extra_flags = _split_lists(xcc)
    if verbose:
        extra_flags.append("-v")

    config = CompilerConfig(
        language=lang,
        standard=std,
        optimization_level=opt_level,
        architecture=arch,
        forced_word_size=64 if m64 else 32 if m32 else None,
        exceptions_enabled=exceptions,
        rtti_enabled=rtti,
        fast_math=fast_math,
        emit_ir=emit_llvm,
        verbose_assembly=verbose_asm,
        show_encoding=show_encoding,
        debug_info=debug_info,
        demangle=demangle,
        combined_output=combined_output,
        defines=_split_lists(define),
        undefs=_split_lists(undef),
        warnings=_split_lists(warn) if warn else DEFAULT_WARNINGS,
        include_directories=[*default_include_directories(), *_split_lists(include)],
        extra_flags=extra_flags,
    )

    snippet_text = input_path.read_text() if input_path else select_template(config, template)
    editor = resolve_editor(default=state.config.tools.default_editor)

    with WorkingSnippet(snippet_text, config.file_extension) as snippet:
        loop = RetryLoop(state.runner, edit=lambda path: edit_file(path, editor), confirm=_confirm)
        outcome = loop.run(snippet.path, config, start_editing=input_path is None)
        try:
            compiled = outcome.unwrap()
        except UserAbort as exc:
            raise typer.Exit(code=exc.exit_code)

        rendered = state.formatter.format(snippet.read(), compiled, config)

        if edit_result or out is not None:
            out_path = out if out is not None else snippet.path
            out_path.write_text(rendered)
            if edit_result:
                edit_file(out_path, editor)
        else:
            typer.echo(rendered, nl=False)


@app.command("env")
def env_check(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config TOML"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON instead of table"),
) -> None:
    """Check that the compiler, encoder, demangler and editor are available."""

    state = build_state(config_path)
    report = detect_environment(state.config)
    if json_output:
        console.print(JSON.from_data(report.to_dict()))
    else:
        _render_env_report(report)
    if report.issues:
        raise typer.Exit(code=1)


def _render_env_report(report: EnvironmentReport) -> None:
    console.rule("Environment Report")
    console.print(f"Python {report.python_version} on {report.platform}; editor: {report.editor}")
    table = Table(title="Tooling")
    table.add_column("Tool")
    table.add_column("Command")
    table.add_column("Status")
    table.add_column("Details")
    for tool in report.tools:
        status = "[green]OK" if tool.available else "[red]Missing"
        table.add_row(tool.name, tool.command or "", status, tool.version or tool.details or "")
    console.print(table)

    if report.issues:
        console.print("[red]Blocking issues detected:")
        for issue in report.issues:
            console.print(f"  • {issue}")

    if report.notes:
        console.print("[cyan]Notes:")
        for note in report.notes:
            console.print(f"  • {note}")


def run() -> None:
    app()
