import os
import json
import logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# 多语言支持
# ---------------------------------------------------------
I18N = {
    'zh': {
        'title': "Folder Treemap - 文件夹空间云图",
        'status_init': "请选择一个文件夹或磁盘开始扫描",
        'status_scanning': "正在扫描 {path} ...",
        'status_ready': "{path} | 总大小: {size} | 文件夹: {dirs} | 文件: {files} | 无法读取: {errors}",
        'status_fetch_error': "无法加载 {path}: {message}",
        'status_scan_error': "扫描失败 {path}: {message}",
        'open_btn': "📂 打开文件夹",
        'refresh_btn': "🔄 刷新",
        'settings_btn': "⚙ 设置",
        'drives_label': "磁盘",
        'settings_title': "设置中心",
        'detail_title': "属性",
        'lang_label': "🌐 界面语言",
        'debounce_label': "⏱ 调整大小延迟 (毫秒)",
        'show_own_files': "显示文件夹自身的文件",
        'color_label': "🎨 颜色自定义",
        'color_bg': "背景",
        'color_border': "边框",
        'color_text': "文字",
        'lang_en': "English",
        'lang_zh': "简体中文",
        'on': "开启",
        'off': "关闭",
        'done': "完成",
        'close': "关闭",
        'own_files': "[当前文件夹中的文件]",
        'empty_folder': "空文件夹",
        'no_scan': "请先扫描一个磁盘或文件夹",
        'tooltip_size': "大小: {size} ({pct}%)",
        'tooltip_dirs': "文件夹: {count}",
        'tooltip_files': "文件: {count}",
        'prop_name': "名称",
        'prop_size': "大小",
        'prop_share': "占上级比例",
        'prop_dirs': "子文件夹",
        'prop_files': "文件",
        'prop_path': "路径",
        'menu_drill': "🔍 进入此文件夹",
        'menu_open_path': "📂 在文件管理器中打开",
        'menu_copy_path': "📋 复制路径",
        'menu_properties': "📄 属性",
    },
    'en': {
        'title': "Folder Treemap",
        'status_init': "Pick a folder or drive to scan",
        'status_scanning': "Scanning {path} ...",
        'status_ready': "{path} | Total: {size} | Folders: {dirs} | Files: {files} | Unreadable: {errors}",
        'status_fetch_error': "Could not load {path}: {message}",
        'status_scan_error': "Scan failed for {path}: {message}",
        'open_btn': "📂 Open Folder",
        'refresh_btn': "🔄 Refresh",
        'settings_btn': "⚙ Settings",
        'drives_label': "Drives",
        'settings_title': "Settings",
        'detail_title': "Properties",
        'lang_label': "🌐 Language",
        'debounce_label': "⏱ Resize delay (ms)",
        'show_own_files': "Show files in this folder",
        'color_label': "🎨 Colors",
        'color_bg': "Background",
        'color_border': "Border",
        'color_text': "Text",
        'lang_en': "English",
        'lang_zh': "简体中文",
        'on': "ON",
        'off': "OFF",
        'done': "Done",
        'close': "Close",
        'own_files': "[Files in this folder]",
        'empty_folder': "Empty folder",
        'no_scan': "Scan a drive or folder first",
        'tooltip_size': "Size: {size} ({pct}%)",
        'tooltip_dirs': "Folders: {count}",
        'tooltip_files': "Files: {count}",
        'prop_name': "Name",
        'prop_size': "Size",
        'prop_share': "Share of parent",
        'prop_dirs': "Subfolders",
        'prop_files': "Files",
        'prop_path': "Path",
        'menu_drill': "🔍 Open in treemap",
        'menu_open_path': "📂 Show in file manager",
        'menu_copy_path': "📋 Copy path",
        'menu_properties': "📄 Properties",
    }
}

# ---------------------------------------------------------
# 默认配置
# ---------------------------------------------------------
DEFAULT_PALETTE = [
    '#6c5ce7', '#e94560', '#4ecca3', '#00b4d8', '#ffc107',
    '#a855f7', '#f97316', '#ec4899', '#14b8a6', '#8b5cf6',
    '#ef4444', '#22c55e', '#3b82f6', '#eab308', '#06b6d4',
]

DEFAULT_COLORS = {
    'bg': "#19191C",
    'border': "#000000",
    'text': "#FFFFFF",
    'empty_text': "#888888",
    'error': "#FF5555",
}

APP_CONFIG = {
    'lang': 'en',
    'resize_debounce_ms': 200,
    'fetch_depth': 2,
    'show_own_files': True,
    'palette': list(DEFAULT_PALETTE),
    'colors': DEFAULT_COLORS.copy(),
    'log_level': 'INFO',
}

CONFIG_FILE = "config.json"
DOCS_APP_DIR = os.path.join(os.path.expanduser("~"), "Documents", "FolderTreemap")
DOCS_CONFIG_FILE = os.path.join(DOCS_APP_DIR, "config.json")


def _defaults():
    settings = dict(APP_CONFIG)
    settings['palette'] = list(DEFAULT_PALETTE)
    settings['colors'] = DEFAULT_COLORS.copy()
    return settings


def load_settings(paths=None):
    settings = _defaults()

    # 优先从文档目录读取配置
    candidates = paths if paths is not None else [DOCS_CONFIG_FILE, CONFIG_FILE]
    actual_path = next((p for p in candidates if os.path.exists(p)), None)

    if actual_path:
        try:
            with open(actual_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", actual_path, e)
            loaded = None
        if isinstance(loaded, dict):
            # 深度合并，确保 colors 等嵌套字典被正确合并
            for k, v in loaded.items():
                if k == 'colors' and isinstance(v, dict):
                    settings['colors'].update(v)
                elif k == 'palette' and not (isinstance(v, list) and v):
                    continue
                else:
                    settings[k] = v

    # 最终确保 lang 合法
    if settings.get('lang') not in I18N:
        settings['lang'] = 'en'

    return settings


def save_settings(settings, paths=None):
    # 确保 settings 是完整的，如果不是，则先加载现有配置进行合并
    targets = paths if paths is not None else [DOCS_CONFIG_FILE, CONFIG_FILE]
    full_settings = load_settings(targets)
    full_settings.update(settings)

    saved = []
    for target in targets:
        try:
            directory = os.path.dirname(target)
            if directory and not os.path.exists(directory):
                os.makedirs(directory)
            with open(target, 'w', encoding='utf-8') as f:
                json.dump(full_settings, f, indent=4, ensure_ascii=False)
            saved.append(target)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", target, e)
    return saved


def get_text(key, lang='en'):
    return I18N.get(lang, I18N['en']).get(key, key)
