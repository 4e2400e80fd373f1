import os
import sys

import click

from .concurrency import run_ordered
from .ignore import collect
from .listing import content_root, enumerate_files
from .output import OutputSink
from .processor import DEFAULT_MAX_LINES, FileProcessor, RenderContext
from .render import FORMATS
from .runtime import (
    clamp_jobs,
    get_default_jobs,
    get_silent,
    reset_silent,
    reset_verbose_logging,
    set_silent,
    set_verbose_logging,
)
from .tree import render_tree
from .utils import (
    ConfigError,
    ShowfilesError,
    parse_date,
    parse_size,
    read_config,
    split_globs,
    warn,
)


def _size_option(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_size(str(value))
    except ConfigError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def _date_option(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_date(value).timestamp()
    except ConfigError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def _glob_option(ctx, param, value):
    if isinstance(value, str):
        value = (value,)
    return tuple(split_globs(value or ()))


def _echo_progress(done: int, total: int, rel_path: str) -> None:
    if not get_silent():
        click.echo(f"[{done}/{total}] {rel_path}", err=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("target", required=False, default=".")
@click.option("-l", "--long", is_flag=True, help="Show files of any length.")
@click.option("--less", is_flag=True, help="Page output through $PAGER.")
@click.option(
    "--color/--no-color",
    default=None,
    help="Colorize the tree and file bodies (default: when stdout is a terminal).",
)
@click.option("-L", "--follow", is_flag=True, help="Follow symbolic links.")
@click.option(
    "-p", "--progress", is_flag=True, help="Report per-file progress on stderr."
)
@click.option(
    "--dry-run", is_flag=True, help="Print line counts instead of file contents."
)
@click.option("-n", "--number", is_flag=True, help="Number output lines.")
@click.option("--full-path", is_flag=True, help="Label files with absolute paths.")
@click.option("-t", "--tree", is_flag=True, help="Print a tree before contents.")
@click.option(
    "--external-tree",
    is_flag=True,
    help="Draw the tree with tree(1) when the patterns allow it.",
)
@click.option(
    "-i",
    "--include",
    multiple=True,
    callback=_glob_option,
    help="Only show paths matching this glob (repeatable, space separated).",
)
@click.option(
    "-e",
    "--exclude",
    multiple=True,
    callback=_glob_option,
    help="Hide paths matching this glob (repeatable, space separated).",
)
@click.option(
    "-s",
    "--max-size",
    callback=_size_option,
    help="Skip files larger than this (e.g. 500K, 10M).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    help="Write output to a file instead of stdout.",
)
@click.option(
    "--ignore-file",
    type=click.Path(),
    help="Read extra ignore globs from this file.",
)
@click.option("--no-gitignore", is_flag=True, help="Do not read .gitignore rules.")
@click.option(
    "-d",
    "--max-depth",
    type=click.IntRange(min=0),
    default=None,
    help="Descend at most this many levels.",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads for reading files (default: $SHOWFILES_JOBS or 1).",
)
@click.option(
    "-c",
    "--copy",
    is_flag=True,
    help="Copy output to the clipboard instead of printing it.",
)
@click.option(
    "--force-ignore-emulation",
    is_flag=True,
    help="Walk the filesystem even inside a git work tree.",
)
@click.option(
    "-I", "--ignore-case", is_flag=True, help="Match globs case-insensitively."
)
@click.option(
    "-m", "--metadata", is_flag=True, help="Add size, mode, owner and mtime."
)
@click.option("--checksum", is_flag=True, help="Add a SHA-256 checksum.")
@click.option(
    "--newer-than",
    callback=_date_option,
    help="Only files modified at or after this date.",
)
@click.option(
    "--older-than",
    callback=_date_option,
    help="Only files modified before this date.",
)
@click.option("--interactive", is_flag=True, help="Confirm each file.")
@click.option(
    "-q", "--silent", is_flag=True, help="Suppress warnings and progress output."
)
@click.option(
    "-f",
    "--format",
    type=click.Choice(FORMATS, case_sensitive=False),
    default="plain",
    show_default=True,
    help="Output framing.",
)
@click.option(
    "--max-lines",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_LINES,
    show_default=True,
    help="Line ceiling applied unless --long is given.",
)
@click.option("-v", "--verbose", is_flag=True, help="Print diagnostics on stderr.")
def cli(
    target,
    long,
    less,
    color,
    follow,
    progress,
    dry_run,
    number,
    full_path,
    tree,
    external_tree,
    include,
    exclude,
    max_size,
    output,
    ignore_file,
    no_gitignore,
    max_depth,
    jobs,
    copy,
    force_ignore_emulation,
    ignore_case,
    metadata,
    checksum,
    newer_than,
    older_than,
    interactive,
    silent,
    format,
    max_lines,
    verbose,
):
    """
    Print the contents of every selected file under TARGET (default: .).

    Selection honors .gitignore rules, include/exclude globs, size and age
    limits, and skips binaries and overly long files.
    """
    verbose_token = set_verbose_logging(verbose)
    silent_token = set_silent(silent)
    try:
        _run(
            target,
            long=long,
            less=less,
            color=color,
            follow=follow,
            progress=progress,
            dry_run=dry_run,
            number=number,
            full_path=full_path,
            tree=tree,
            external_tree=external_tree,
            include=include,
            exclude=exclude,
            max_size=max_size,
            output=output,
            ignore_file=ignore_file,
            no_gitignore=no_gitignore,
            max_depth=max_depth,
            jobs=jobs,
            copy=copy,
            force_ignore_emulation=force_ignore_emulation,
            ignore_case=ignore_case,
            metadata=metadata,
            checksum=checksum,
            newer_than=newer_than,
            older_than=older_than,
            interactive=interactive,
            format=format.lower(),
            max_lines=max_lines,
        )
    except ShowfilesError as e:
        raise click.ClickException(str(e))
    finally:
        reset_silent(silent_token)
        reset_verbose_logging(verbose_token)


def _run(target, *, color, jobs, interactive, **opts):
    if not os.path.lexists(target):
        raise click.BadParameter(
            f"'{target}' does not exist", param_hint="'TARGET'"
        )
    if (
        opts["newer_than"] is not None
        and opts["older_than"] is not None
        and opts["newer_than"] >= opts["older_than"]
    ):
        raise click.UsageError("--newer-than must be earlier than --older-than")

    to_terminal = not (opts["output"] or opts["copy"]) and sys.stdout.isatty()
    if color is None:
        color = to_terminal

    jobs = clamp_jobs(jobs if jobs is not None else get_default_jobs())
    if interactive and jobs > 1:
        warn("--interactive reads answers one file at a time; ignoring --jobs")
        jobs = 1

    patterns = collect(
        target,
        include_vcs_ignore=not opts["no_gitignore"],
        ignore_file=opts["ignore_file"],
        excludes=opts["exclude"],
        includes=opts["include"],
        ignore_case=opts["ignore_case"],
    )
    root = content_root(target)
    files = enumerate_files(
        target,
        force_walk=opts["force_ignore_emulation"],
        max_depth=opts["max_depth"],
        follow_symlinks=opts["follow"],
        use_vcs_ignore=not opts["no_gitignore"],
        patterns=patterns,
    )

    context = RenderContext(
        root=root,
        patterns=patterns,
        includes=patterns.include,
        excludes=tuple(opts["exclude"]),
        ignore_case=opts["ignore_case"],
        max_depth=opts["max_depth"],
        max_size=opts["max_size"],
        newer_than=opts["newer_than"],
        older_than=opts["older_than"],
        max_lines=opts["max_lines"],
        long=opts["long"],
        format=opts["format"],
        color=color,
        metadata=opts["metadata"],
        checksum=opts["checksum"],
        number=opts["number"],
        full_path=opts["full_path"],
        dry_run=opts["dry_run"],
        interactive=interactive,
        follow_symlinks=opts["follow"],
    )
    highlight = None
    if color:
        from .highlight import highlight_source

        highlight = highlight_source
    processor = FileProcessor(context, highlight=highlight)

    sink = OutputSink(
        output_file=opts["output"],
        pager=opts["less"],
        copy_to_clipboard=opts["copy"],
        color=color,
    )
    if opts["tree"] and os.path.isdir(target):
        sink(
            render_tree(
                target,
                max_depth=opts["max_depth"],
                patterns=patterns,
                color=color,
                follow_symlinks=opts["follow"],
                prefer_external=opts["external_tree"],
            )
        )
        if files:
            sink("\n\n")
    run_ordered(
        files,
        processor,
        jobs=jobs,
        sink=sink,
        progress=_echo_progress if opts["progress"] else None,
    )
    sink.close()


def main(argv=None):
    try:
        cli.main(
            args=argv,
            prog_name="showfiles",
            standalone_mode=False,
            default_map=read_config(),
        )
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except ShowfilesError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
