"""``projget get`` command.

Clones a remote project into a new local project root, or initializes an
empty repository connected to the remote when the project has no code yet,
then runs the initial build.
"""

from __future__ import annotations

from pathlib import Path

import click

from projget.cli.common import cli_error_handler
from projget.cli.context import CLIContext, ExitCode
from projget.cli.presenter import (
    Message,
    MessageLevel,
    exit_code_for,
    missing_project_message,
    present,
)
from projget.cli.prompts import ConsoleChooser
from projget.exceptions import ProjectNotFoundError
from projget.git import GitGateway
from projget.logging import bind_context, get_logger
from projget.project import CatalogProjectResolver, LocalProjectRegistry
from projget.provision import (
    CommandBuildTrigger,
    ProvisioningStateMachine,
    provision_project,
)
from projget.staging import FilesystemStaging

__all__ = ["get"]


def _emit(messages: list[Message], quiet: bool) -> None:
    for message in messages:
        if quiet and message.level is MessageLevel.INFO:
            continue
        click.echo(message.text, err=message.to_stderr)


@click.command("get")
@click.argument("project_id", required=False)
@click.argument("directory_name", required=False)
@click.option(
    "-e",
    "--environment",
    default=None,
    help="The environment ID to clone. Defaults to 'master'.",
)
@click.option(
    "--no-build",
    is_flag=True,
    default=False,
    help="Do not build the retrieved project.",
)
@click.option(
    "--include-inactive",
    is_flag=True,
    default=False,
    help="List inactive environments too.",
)
@click.option(
    "--host",
    default=None,
    help="The project's API hostname.",
)
@click.pass_context
def get(
    ctx: click.Context,
    project_id: str | None,
    directory_name: str | None,
    environment: str | None,
    no_build: bool,
    include_inactive: bool,
    host: str | None,
) -> None:
    """Clone and build a project locally.

    DIRECTORY_NAME defaults to the project ID.

    Examples:
        projget get demo

        projget get demo demo-site --environment staging --no-build
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    config = cli_ctx.config

    with cli_error_handler():
        resolver = CatalogProjectResolver(config.projects_file)
        chooser = ConsoleChooser() if cli_ctx.interactive else None
        api_host = host or config.api_host

        if not project_id:
            projects = resolver.list_projects() if chooser is not None else []
            if chooser is None or not projects:
                _emit([missing_project_message()], cli_ctx.quiet)
                raise SystemExit(ExitCode.FAILURE)
            project_id = chooser.choose(
                {project.id: project.label for project in projects},
                "Enter a number to choose which project to clone:",
            )

        descriptor = resolver.get_project(project_id, api_host)
        if descriptor is None:
            raise ProjectNotFoundError(project_id, api_host)

        target = Path(directory_name or project_id)
        bind_context(project_id=descriptor.id, target=str(target))
        logger.debug("get_started", environment=environment, no_build=no_build)

        staging = FilesystemStaging()
        machine = ProvisioningStateMachine(
            GitGateway(remote_name=config.remote_name),
            staging,
            LocalProjectRegistry(),
            resolver,
            chooser,
            default_environment=config.default_environment,
            repository_dir=config.repository_dir,
        )
        trigger = (
            CommandBuildTrigger(
                config.build.command,
                repository_dir=config.repository_dir,
                timeout_seconds=config.build.timeout_seconds,
            )
            if config.build.command
            else None
        )

        result = provision_project(
            machine,
            trigger,
            staging,
            descriptor,
            target,
            environment,
            no_build=no_build,
            include_inactive=include_inactive,
        )

    _emit(
        present(result, display_name=str(target), remote_name=config.remote_name),
        cli_ctx.quiet,
    )
    raise SystemExit(exit_code_for(result))
