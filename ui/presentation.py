from config import DEFAULT_PALETTE, get_text

# 标签显示阈值 (像素)
NAME_LABEL_MIN = (50, 25)
SIZE_LABEL_MIN = (80, 40)


def palette_color(index, palette=None):
    palette = palette or DEFAULT_PALETTE
    return palette[index % len(palette)]


def percent_of(size, total):
    if total <= 0:
        return 0.0
    return size / total * 100


def format_percent(size, total):
    return f"{percent_of(size, total):.1f}"


def cell_labels(rect, total):
    """返回矩形内要绘制的文字行，空间不足时返回空列表"""
    lines = []
    if rect.w > NAME_LABEL_MIN[0] and rect.h > NAME_LABEL_MIN[1]:
        lines.append(rect.item.name)
        if rect.w > SIZE_LABEL_MIN[0] and rect.h > SIZE_LABEL_MIN[1]:
            lines.append(f"{rect.item.formatted_size()} ({format_percent(rect.item.size, total)}%)")
    return lines


def tooltip_lines(item, total, lang='en'):
    lines = [
        item.name,
        get_text('tooltip_size', lang).format(size=item.formatted_size(),
                                              pct=format_percent(item.size, total)),
    ]
    if item.child_dir_count > 0:
        lines.append(get_text('tooltip_dirs', lang).format(count=item.child_dir_count))
    if item.child_file_count > 0:
        lines.append(get_text('tooltip_files', lang).format(count=item.child_file_count))
    lines.append(item.path)
    return lines


def property_rows(item, total, lang='en'):
    """属性对话框的 (标签, 值) 行"""
    return [
        (get_text('prop_name', lang), item.name),
        (get_text('prop_size', lang), f"{item.formatted_size()} ({item.size:,} B)"),
        (get_text('prop_share', lang), f"{format_percent(item.size, total)}%"),
        (get_text('prop_dirs', lang), str(item.child_dir_count)),
        (get_text('prop_files', lang), str(item.child_file_count)),
        (get_text('prop_path', lang), item.path),
    ]


def empty_state_text(has_root, lang='en'):
    return get_text('empty_folder' if has_root else 'no_scan', lang)
