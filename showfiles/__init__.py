def show(
    target: str = ".",
    *,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    ignore_file: str | None = None,
    gitignore: bool = True,
    max_depth: int | None = None,
    max_size: int | str | None = None,
    long: bool = False,
    format: str = "plain",
    follow_symlinks: bool = False,
    force_walk: bool = False,
    ignore_case: bool = False,
    jobs: int = 1,
) -> str:
    from .concurrency import run_ordered
    from .ignore import collect
    from .listing import content_root, enumerate_files
    from .processor import FileProcessor, RenderContext
    from .utils import parse_size

    if isinstance(max_size, str):
        max_size = parse_size(max_size)
    patterns = collect(
        target,
        include_vcs_ignore=gitignore,
        ignore_file=ignore_file,
        excludes=exclude or (),
        includes=include or (),
        ignore_case=ignore_case,
    )
    files = enumerate_files(
        target,
        force_walk=force_walk,
        max_depth=max_depth,
        follow_symlinks=follow_symlinks,
        use_vcs_ignore=gitignore,
        patterns=patterns,
    )
    context = RenderContext(
        root=content_root(target),
        patterns=patterns,
        includes=patterns.include,
        excludes=tuple(exclude or ()),
        ignore_case=ignore_case,
        max_depth=max_depth,
        max_size=max_size,
        long=long,
        format=format,
        follow_symlinks=follow_symlinks,
    )
    chunks: list[str] = []
    run_ordered(files, FileProcessor(context), jobs=jobs, sink=chunks.append)
    return "".join(chunks)


def tree(
    target: str = ".",
    *,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    gitignore: bool = True,
    max_depth: int | None = None,
    ignore_case: bool = False,
    follow_symlinks: bool = False,
) -> str:
    from .ignore import collect
    from .tree import render_tree

    patterns = collect(
        target,
        include_vcs_ignore=gitignore,
        excludes=exclude or (),
        includes=include or (),
        ignore_case=ignore_case,
    )
    return render_tree(
        target, max_depth, patterns, follow_symlinks=follow_symlinks
    )
