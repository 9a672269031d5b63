import logging
from pathlib import Path

import yaml

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "run_config.yaml"

REQUIRED_KEYS = [
    'log_dir', 'hostname', 'port',
    'model', 'temperature', 'seed', 'prompt_file'
]

PATH_KEYS = ['log_dir', 'prompt_file']

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(funcName)s - %(message)s"


# Load configuration
def load_config(file_path=DEFAULT_CONFIG):
    with open(file_path, "r") as file:
        config = yaml.safe_load(file)  # Use safe_load to avoid security risks
    return config or {}


def select_run_config(config, run_mode, config_path=DEFAULT_CONFIG):
    """
    Pick the section for a run mode and check it is complete.

    :param config: the whole parsed config file
    :param run_mode: "dev" or "prod"
    :param config_path: where the config came from; relative paths resolve against its folder
    :return: the selected section, with paths made absolute
    :raises KeyError: if the run mode or a required key is missing
    """
    if run_mode not in config:
        raise KeyError(f"run_mode '{run_mode}' not found in {config_path}")
    selected = dict(config[run_mode])

    missing = [key for key in REQUIRED_KEYS if key not in selected]
    if missing:
        raise KeyError(f"Missing required config keys: {', '.join(missing)}")

    base = Path(config_path).resolve().parent
    for key in PATH_KEYS:
        path = Path(selected[key])
        if not path.is_absolute():
            selected[key] = base / path
    return selected


def configure_logging(log_dir, log_file, debug=False):
    """
    Log to both console and a file in log_dir.
    """
    log_dir = Path(log_dir)
    if not log_dir.exists():
        log_dir.mkdir(mode=0o755, parents=True)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / log_file)
        ],
        force=True
    )
    logging.info(f"Logging to {log_dir / log_file}")
