import re
import sys
import warnings
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

from locale_harness.config import settings
from locale_harness.i18n import LocaleConfig, get_locale
from locale_harness.utils.data.yaml_cases_loader import InvalidYamlFormatError, load_yaml_file
from locale_harness.utils.logger import logger


# ==================== YAML 用例参数化 ====================
@lru_cache(maxsize=32)
def _cached_load_yaml(file_path_str: str) -> Dict[str, List[Dict[str, Any]]]:
    """带缓存的YAML加载（基于绝对路径）"""
    return load_yaml_file(Path(file_path_str))


def pytest_generate_tests(metafunc):
    """
    @pytest.mark.yaml_data(file="xxx.yaml", group="yyy") 动态参数化

    测试函数参数名必须与 YAML 字段名一致；文件或用例组不存在时跳过测试。
    """
    marker = metafunc.definition.get_closest_marker("yaml_data")
    if marker is None:
        return

    try:
        file_name = marker.kwargs["file"]
        group_name = marker.kwargs["group"]
    except KeyError as e:
        _raise_usage_error(
            metafunc,
            f"@pytest.mark.yaml_data 缺少必需参数 {e}\n"
            f"  正确用法: @pytest.mark.yaml_data(file='xxx.yaml', group='yyy')"
        )

    abs_file_path = Path(settings.project_root) / "test_data" / file_name
    if not abs_file_path.exists():
        _warn_and_skip(metafunc, f"YAML数据文件不存在，跳过测试: {abs_file_path}")
        return

    try:
        groups = _cached_load_yaml(str(abs_file_path))
    except InvalidYamlFormatError as e:
        _raise_usage_error(metafunc, f"YAML数据格式验证失败，测试终止:\n{e}")

    cases = groups.get(group_name)
    if not cases:
        _warn_and_skip(metafunc, f"YAML中不存在用例组 '{group_name}'，可用组: {list(groups) or '[空]'}")
        return

    yaml_fields = set(cases[0].keys())
    param_names = [p for p in metafunc.fixturenames if p in yaml_fields]
    if not param_names:
        _raise_usage_error(
            metafunc,
            f"测试函数参数与YAML字段无匹配\n"
            f"  YAML字段: {sorted(yaml_fields)}\n"
            f"  测试参数: {sorted(metafunc.fixturenames)}"
        )

    param_values: List[Tuple[Any, ...]] = []
    param_ids: List[str] = []
    for idx, case in enumerate(cases):
        if any(p not in case for p in param_names):
            continue
        case_id = str(case.get("id", "")) or f"{group_name}_{idx}"
        case_id = re.sub(r'_+', '_', re.sub(r'[^a-zA-Z0-9_]', '_', case_id)).strip('_')
        param_values.append(tuple(case[p] for p in param_names))
        param_ids.append(case_id or f"{group_name}_{idx}")

    if not param_values:
        _warn_and_skip(metafunc, f"用例组 '{group_name}' 无有效用例（所需参数: {param_names}）")
        return

    metafunc.parametrize(",".join(param_names), param_values, ids=param_ids)


def _raise_usage_error(metafunc, message: str) -> None:
    """在收集阶段抛出使用错误"""
    raise pytest.UsageError(f"[YAML数据错误] in {metafunc.definition.nodeid}\n{message}")


def _warn_and_skip(metafunc, message: str) -> None:
    """收集阶段不能 pytest.skip()：发出警告并参数化空列表让 pytest 跳过"""
    warnings.warn(f"[YAML数据] in {metafunc.definition.nodeid}\n{message}", UserWarning, stacklevel=2)
    print(f"\n⚠️  YAML数据跳过 [{metafunc.definition.nodeid}]:\n{message}", file=sys.stderr)

    safe_params = [p for p in metafunc.fixturenames if p.isidentifier() and not p.startswith("_") and p != "request"]
    metafunc.parametrize(safe_params[0] if safe_params else "yaml_skip_marker", [], ids=[])


# ==================== 语言 ====================
def pytest_report_header(config):
    locale_config = LocaleConfig.from_environment()
    fallback = "" if locale_config.is_supported else f" (未注册，回退到 {locale_config.effective_language.value})"
    return f"locale: {locale_config.env_var}={locale_config.language}{fallback}"


@pytest.fixture(scope="session")
def locale_config() -> LocaleConfig:
    """进程级语言配置，会话开始时构建一次"""
    config = LocaleConfig.from_environment()
    if not config.is_supported:
        logger.warning(f"{config.env_var}={config.language!r} 未注册，使用 {config.effective_language.value} 目录")
    return config


@pytest.fixture(scope="session")
def active_language(locale_config) -> str:
    return locale_config.language


@pytest.fixture(scope="session")
def catalog(locale_config):
    return get_locale(locale_config.language)


# ==================== 浏览器（仅 e2e） ====================
@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(scope="session")
def playwright_instance():
    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def browser(playwright_instance):
    browser_config = settings.browser
    launcher = getattr(playwright_instance, browser_config.type)
    browser = launcher.launch(headless=browser_config.headless, slow_mo=browser_config.slow_mo)
    yield browser
    browser.close()


@pytest.fixture
def page(browser, locale_config, request):
    """每个测试独立的浏览器上下文，避免语言之间共享 UI 状态"""
    context = browser.new_context(
        viewport=settings.browser.viewport,
        locale=locale_config.effective_language.value,
    )
    context.set_default_timeout(settings.timeouts.element_wait)
    context.set_default_navigation_timeout(settings.timeouts.page_load)
    page = context.new_page()
    yield page

    rep_call = getattr(request.node, "rep_call", None)
    if rep_call is not None and rep_call.failed and settings.screenshot_on_failure:
        path = Path(settings.screenshot_dir) / f"{request.node.name}_{locale_config.language}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(path), full_page=True)
        logger.info(f"Failure screenshot: {path}")
    context.close()
