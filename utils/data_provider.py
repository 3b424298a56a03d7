import os
import logging

logger = logging.getLogger(__name__)


class ScanError(OSError):
    """扫描根目录不存在或不可读"""


class SubtreeNotFoundError(LookupError):
    """请求的路径不在扫描结果中"""


class DirRecord:
    __slots__ = ('name', 'path', 'size', 'own_size', 'file_count', 'dir_count', 'errors', 'children_paths')

    def __init__(self, name, path, own_size=0, file_count=0, dir_count=0, children_paths=None):
        self.name = name
        self.path = path
        self.size = own_size
        self.own_size = own_size
        self.file_count = file_count
        self.dir_count = dir_count
        self.errors = 0  # 本目录中无法读取的条目数
        self.children_paths = children_paths or []


def normalize_path(path):
    return os.path.normpath(path)


def display_name(path):
    """路径最后一段，根目录 (如 C:\\ 或 /) 则返回路径本身"""
    parts = [p for p in path.replace('\\', '/').split('/') if p]
    return parts[-1] if parts else path


class TreeIndex:
    """扫描结果的内存索引：路径 -> DirRecord"""

    def __init__(self, root_path=None):
        self.root_path = normalize_path(root_path) if root_path else None
        self.records = {}
        self.dirs_scanned = 0
        self.files_found = 0
        self.errors_count = 0

    @property
    def total_size(self):
        root = self.records.get(self.root_path)
        return root.size if root else 0

    def __contains__(self, path):
        return normalize_path(path) in self.records

    def __len__(self):
        return len(self.records)

    def get(self, path):
        return self.records.get(normalize_path(path))

    def stats(self):
        return {
            'root_path': self.root_path,
            'dirs_scanned': self.dirs_scanned,
            'files_found': self.files_found,
            'total_size': self.total_size,
            'errors_count': self.errors_count,
        }

    def fetch_subtree(self, path, depth=2):
        record = self.get(path)
        if record is None:
            raise SubtreeNotFoundError(path)
        return self._node(record, depth)

    def _node(self, record, depth):
        children = []
        if depth > 0:
            for child_path in record.children_paths:
                child = self.records.get(child_path)
                if child is not None:
                    children.append(self._node(child, depth - 1))
        return {
            'name': record.name,
            'path': record.path,
            'size': record.size,
            'own_size': record.own_size,
            'file_count': record.file_count,
            'dir_count': record.dir_count,
            'children': children,
        }

    def rescan(self, path):
        """
        重新扫描某个子树 (例如外部删除文件之后)，并把大小变化传递给所有祖先节点。
        """
        path = normalize_path(path)
        old = self.records.get(path)
        if old is None:
            raise SubtreeNotFoundError(path)

        fresh = scan_directory(path)

        # 移除旧子树
        stack = [path]
        while stack:
            current = self.records.pop(stack.pop(), None)
            if current is not None:
                stack.extend(current.children_paths)

        self.records.update(fresh.records)
        delta = fresh.total_size - old.size

        if path != self.root_path and delta:
            parent = os.path.dirname(path)
            while parent in self.records:
                self.records[parent].size += delta
                if parent == self.root_path:
                    break
                next_parent = os.path.dirname(parent)
                if next_parent == parent:
                    break
                parent = next_parent

        self.dirs_scanned = len(self.records)
        self.files_found = sum(r.file_count for r in self.records.values())
        self.errors_count = sum(r.errors for r in self.records.values())
        return delta


def scan_directory(root_path):
    """
    遍历 root_path，建立 TreeIndex。
    不跟随符号链接；无法读取的条目计入 errors_count 并跳过。
    """
    root_path = normalize_path(root_path)
    if not os.path.isdir(root_path):
        raise ScanError(f"Not a directory: {root_path}")

    index = TreeIndex(root_path)
    order = []
    stack = [root_path]

    # 1. 先序遍历：记录每个目录自身的文件
    while stack:
        dir_path = stack.pop()
        record = DirRecord(display_name(dir_path), dir_path)
        index.records[dir_path] = record
        order.append(dir_path)
        try:
            entries = list(os.scandir(dir_path))
        except OSError as e:
            record.errors += 1
            logger.debug("Cannot read %s: %s", dir_path, e)
            continue

        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_file(follow_symlinks=False):
                    record.own_size += entry.stat(follow_symlinks=False).st_size
                    record.file_count += 1
                elif entry.is_dir(follow_symlinks=False):
                    child_path = normalize_path(entry.path)
                    record.children_paths.append(child_path)
                    record.dir_count += 1
                    stack.append(child_path)
            except OSError as e:
                record.errors += 1
                logger.debug("Cannot stat %s: %s", entry.path, e)

        index.files_found += record.file_count

    # 2. 逆序累加：子目录总是在父目录之后被访问
    for dir_path in reversed(order):
        record = index.records[dir_path]
        record.size = record.own_size + sum(
            index.records[c].size for c in record.children_paths if c in index.records)

    index.dirs_scanned = len(order)
    index.errors_count = sum(r.errors for r in index.records.values())
    logger.info("Scanned %s: %d dirs, %d files, %d errors",
                root_path, index.dirs_scanned, index.files_found, index.errors_count)
    return index
