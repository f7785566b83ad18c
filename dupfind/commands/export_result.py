"""dupfind export-result: write the duplicate report from the current catalog."""

from dupfind.commands import effective_config, emit_report, open_catalog


def cmd_export_result(args) -> None:
    cfg = effective_config(args)
    open_catalog(cfg)
    emit_report(cfg, quiet=getattr(args, "quiet", False))
