"""Config commands -- view and modify the reqtree configuration.

Provides the ``reqtree config`` sub-command group for reading and
updating :class:`~reqtree.models.ReqtreeConfig`, which holds the snapshot
location, default names for new items, and the default output format.
"""

from __future__ import annotations

import typer

from reqtree.exceptions import InvalidUsageError
from reqtree.output import get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the current configuration and the snapshot it resolves to.

    Example::

        reqtree config show
    """
    from reqtree.commands import get_config
    from reqtree.config import get_config_dir, resolve_storage_path

    config = get_config(ctx)
    info(f"Config directory: {get_config_dir()}")
    info(f"Snapshot file: {resolve_storage_path(ctx.obj.get('storage'), config)}")
    get_output().print_json(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The updated config is validated
    before it is saved.

    Raises:
        InvalidUsageError: If the key does not exist or validation fails.

    Example::

        reqtree config set storage_path ~/work/collections.json
        reqtree config set output.format plain
    """
    from pydantic import ValidationError

    from reqtree.commands import get_config
    from reqtree.config import save_config
    from reqtree.models import ReqtreeConfig

    data = get_config(ctx).model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        raise InvalidUsageError(f"Unknown config key: {key}")
    target[final_key] = value

    try:
        new_config = ReqtreeConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"Validation error: {exc}") from None

    save_config(new_config)
    ctx.obj["config"] = new_config
    success(f"Set {key} = {value}")
