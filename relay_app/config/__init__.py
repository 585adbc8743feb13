from .config import Config, basedir, project_root_dir

__all__ = ["Config", "basedir", "project_root_dir"]
