"""RHDH 设置页选择器与结构快照"""
from ..assertions import StructuralSnapshot
from ..utils.selector_helper import Selector

# 访客登录按钮
enter_button = Selector(
    role="button",
    role_name="Enter",
    description="访客登录按钮"
)

# 快速入门遮罩的隐藏按钮
hide_button = Selector(
    role="button",
    role_name="Hide",
    description="隐藏快速入门遮罩"
)

# 语言设置所在的列表（结构检查锚点）
language_list = Selector(
    role="list",
    first=True,
    description="设置页第一个列表"
)

# 语言选择器：test id 定位，分别取标签 <p> 与取值 <div>
language_select_label = Selector(
    test_id="select",
    inner_css="p",
    description="语言选择器标签 (data-testid=select > p)"
)

language_select_value = Selector(
    test_id="select",
    inner_css="div",
    first=True,
    description="语言选择器取值 (data-testid=select > div)"
)

# 语言选择器：按角色 + 本地化名称定位，与 test id 定位互相独立
language_select_by_role = Selector(
    role="combobox",
    role_name_key="rhdhLanguage",
    description="语言选择器 (combobox + 本地化名称)"
)

# 语言区块的页面结构，任何语言下都相同
language_section_snapshot = StructuralSnapshot.from_yaml("""
- listitem:
  - text: Language
  - paragraph: Change the language
""")
