from .yaml_cases_loader import load_yaml_file, InvalidYamlFormatError

__all__ = ["load_yaml_file", "InvalidYamlFormatError"]
