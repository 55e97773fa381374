from install_assistant.migration.snapshot import ManagerCli, scoped_snapshot_file

__all__ = ["ManagerCli", "scoped_snapshot_file"]
