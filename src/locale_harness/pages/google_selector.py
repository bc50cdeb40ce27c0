"""Google 首页选择器"""
import re

from ..assertions import StructuralSnapshot
from ..utils.selector_helper import Selector

# Gmail 链接：品牌名不随语言变化
gmail_link = Selector(
    role="link",
    role_name=re.compile("Gmail", re.IGNORECASE),
    first=True,
    description="Gmail 链接"
)

# Gmail 页面主标题（本地化）
gmail_heading = Selector(
    role="heading",
    role_name_key="gmailHeading",
    description="Gmail 主标题"
)

# 搜索区域（结构检查锚点）
search_form = Selector(
    role="search",
    first=True,
    description="Google 搜索区域"
)

# 接受 cookie 的按钮（部分地区会弹出）
consent_accept = Selector(
    css="button#L2AGLb",
    description="Cookie 同意按钮"
)

search_form_snapshot = StructuralSnapshot.from_yaml("""
- combobox
""")
