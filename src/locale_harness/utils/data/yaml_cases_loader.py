from pathlib import Path
from typing import Any, Dict, List

import yaml

MAX_FILE_SIZE = 1024 * 1024  # 1MB


class InvalidYamlFormatError(ValueError):
    """YAML 用例数据格式验证失败"""


def load_yaml_file(file_path: Path) -> Dict[str, List[Dict[str, Any]]]:
    """
    加载并验证 YAML 用例数据

    文件结构::

        group_name:            # 单个用例
          field: value
        other_group:           # 多个用例
          - field: value
          - field: value

    :return: 统一结构 {group_name: [case_dict, ...]}
    :raises FileNotFoundError: 文件不存在或不是文件
    :raises InvalidYamlFormatError: 格式验证失败
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"YAML 文件不存在: {file_path}")

    if file_path.stat().st_size > MAX_FILE_SIZE:
        raise InvalidYamlFormatError(f"YAML 文件过大 (>1MB): {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlFormatError(f"YAML 语法错误 in {file_path}:\n{e}") from e
    except UnicodeDecodeError as e:
        raise InvalidYamlFormatError(f"YAML 文件编码错误（需 UTF-8）in {file_path}:\n{e}") from e

    if raw_data is None:
        return {}

    if not isinstance(raw_data, dict):
        raise InvalidYamlFormatError(
            f"YAML 根必须是字典，当前类型: {type(raw_data).__name__}\n文件: {file_path}"
        )

    normalized: Dict[str, List[Dict[str, Any]]] = {}
    for group_name, value in raw_data.items():
        cases = [value] if isinstance(value, dict) else value
        _validate_group(group_name, cases, file_path)
        normalized[group_name] = cases
    return normalized


def _validate_group(group_name: str, cases: Any, file_path: Path) -> None:
    """用例组必须是非空字典或非空字典列表"""
    if not isinstance(cases, list):
        _raise_format_error(
            group_name,
            f"值必须是字典或字典列表，当前类型: {type(cases).__name__}，值: {cases!r}",
            file_path
        )
    if not cases:
        _raise_format_error(group_name, "用例组不能为空", file_path)

    for idx, case in enumerate(cases, start=1):
        if not isinstance(case, dict):
            _raise_format_error(
                group_name,
                f"第 {idx} 个用例必须是字典，当前类型: {type(case).__name__}，值: {case!r}",
                file_path
            )
        if not case:
            _raise_format_error(group_name, f"第 {idx} 个用例不能为空字典", file_path)


def _raise_format_error(group_name: str, message: str, file_path: Path) -> None:
    raise InvalidYamlFormatError(
        f"YAML 格式验证失败 in {file_path}\n"
        f"组: '{group_name}'\n"
        f"{message}"
    )
