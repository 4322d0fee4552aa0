"""Pipeline configuration: YAML file merged over built-in defaults."""

import copy
from typing import Optional

import yaml


DEFAULTS = {
    "windows": {
        "width": 50,
        "step": 25,
    },
    "summits": {
        # null: floor(width / 2) - 1 of the winning window
        "offset": None,
        "strict": False,
    },
    "origins": {
        "merge_distance": 0,
        "min_width": 50,
        "name_prefix": "HO",
    },
    "bowtie2": {
        "index": None,
        "threads": 4,
        "extra_args": [],
    },
    "macs2": {
        "genome_size": "hs",
        "qvalue": 0.05,
        "format": "BAM",
    },
    "sicer": {
        "species": "hg38",
        "window_size": 200,
        "gap_size": 600,
        "fdr": 0.01,
    },
    "samples": [],
}


def merge_config(user: Optional[dict]) -> dict:
    """Overlay a user config on DEFAULTS, one level deep."""
    config = copy.deepcopy(DEFAULTS)
    if not user:
        return config

    unknown = sorted(set(user) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"unknown config section(s): {', '.join(unknown)}")

    for section, values in user.items():
        if isinstance(DEFAULTS[section], dict):
            if values is None:
                continue
            if not isinstance(values, dict):
                raise ValueError(f"config section '{section}' must be a mapping")
            unknown_keys = sorted(set(values) - set(DEFAULTS[section]))
            if unknown_keys:
                raise ValueError(
                    f"unknown key(s) in '{section}': {', '.join(unknown_keys)}"
                )
            config[section].update(values)
        else:
            if not isinstance(values, list):
                raise ValueError(f"config section '{section}' must be a list")
            config[section] = values

    width, step = config["windows"]["width"], config["windows"]["step"]
    if not isinstance(width, int) or not isinstance(step, int):
        raise ValueError("windows.width and windows.step must be integers")
    offset = config["summits"]["offset"]
    if offset is not None and not isinstance(offset, int):
        raise ValueError("summits.offset must be an integer or null")

    return config


def load_config(path: Optional[str] = None) -> dict:
    """Load a pipeline YAML config; None returns the defaults."""
    if path is None:
        return merge_config(None)
    with open(path) as f:
        user = yaml.safe_load(f)
    if user is not None and not isinstance(user, dict):
        raise ValueError(f"{path}: top level of the config must be a mapping")
    return merge_config(user)
