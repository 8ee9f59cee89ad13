import os

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from snapshot_retention.errors import ValidationError
from snapshot_retention.models import ConfigFile
from snapshot_retention.utils.yaml_loader import get_yaml_instance


class PolicyRepository:
    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self.yaml: YAML = get_yaml_instance()

    def load(self) -> ConfigFile:
        if not os.path.isfile(self.file_path):
            return ConfigFile()
        with open(self.file_path, "r") as f:
            try:
                data = self.yaml.load(f)
            except YAMLError as e:
                raise ValidationError(f"Unreadable configuration file {self.file_path}: {e}") from e
        if data is None:
            return ConfigFile()
        try:
            return ConfigFile(**data)
        except Exception as e:
            raise ValidationError(f"Invalid configuration file structure: {e}") from e
