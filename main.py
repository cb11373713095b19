# file: main.py

import logging
import os
import tempfile
from pathlib import Path

from core.service_locator import ServiceLocator
from core.command_executor import CommandExecutor
from core.event_dispatcher import EventDispatcher
from core.commands.composite_command import CompositeCommand
from core.commands.file_commands import CopyFile, CreateFile, DeleteFile

from utils.config_loader import ConfigLoader
from utils.logger import setup_logging


def register_core_services(locator_instance: ServiceLocator, config_dir: Path):
    """Registers all services in the service locator."""
    locator_instance.register("config_loader", lambda: ConfigLoader(config_dir), singleton=True)
    locator_instance.register("event_dispatcher", EventDispatcher, singleton=True)
    locator_instance.register("command_executor", lambda: CommandExecutor(locator_instance), singleton=True)


def build_install_command(work_dir: Path) -> CompositeCommand:
    """The installer from the Command Pattern notes: create, copy, then delete the original."""
    install = CompositeCommand()
    install.add_command(CreateFile(work_dir / "file.txt", "Hello World"))
    install.add_command(CopyFile(work_dir / "file.txt", work_dir / "file2.txt"))
    install.add_command(DeleteFile(work_dir / "file.txt"))
    return install


def run_demo(locator_instance: ServiceLocator, work_dir: Path):
    logger = logging.getLogger(__name__)
    executor: CommandExecutor = locator_instance.resolve("command_executor")
    events: EventDispatcher = locator_instance.resolve("event_dispatcher")

    def on_command_event(event_type: str, command, **kwargs):
        logger.info(f"{event_type}: {command.describe()}")

    events.subscribe("COMMAND_EVENT", on_command_event)

    install = build_install_command(work_dir)
    executor.execute(install)
    logger.info(f"Installed: {install.describe()}")
    logger.info(f"Files after install: {sorted(p.name for p in work_dir.iterdir())}")

    executor.undo()
    logger.info(f"Files after undo: {sorted(p.name for p in work_dir.iterdir())}")


if __name__ == "__main__":
    locator = ServiceLocator()

    # 1. Register services
    app_data_dir = Path(os.getenv("APPDATA") or Path.home() / ".config" / "CommandLog") / "config"
    register_core_services(locator, app_data_dir)

    # 2. Load config and set up logging
    config_loader: ConfigLoader = locator.resolve("config_loader")
    config_loader.load_all_configs()
    setup_logging(config_loader)

    # 3. Run the installer demo in a scratch directory
    with tempfile.TemporaryDirectory() as scratch:
        run_demo(locator, Path(scratch))

    logging.info("Exiting normally.")
