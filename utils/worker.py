import logging

from PyQt6.QtCore import QObject, pyqtSignal

from utils.data_provider import scan_directory, ScanError, SubtreeNotFoundError

logger = logging.getLogger(__name__)


class SubtreeWorker(QObject):
    """
    运行在独立 QThread 中的数据端：负责扫描目录并响应 fetch_subtree 请求。
    所有结果都通过信号返回，异常不会离开工作线程。
    """
    scan_finished = pyqtSignal(str, dict)   # (root_path, stats)
    scan_failed = pyqtSignal(str, str)      # (root_path, message)
    subtree_ready = pyqtSignal(int, dict)   # (generation, node)
    fetch_failed = pyqtSignal(int, str)     # (generation, message)

    def __init__(self, index=None):
        super().__init__()
        self.index = index
        self.is_busy = False

    def scan(self, root_path):
        """执行耗时的目录扫描"""
        self.is_busy = True
        try:
            self.index = scan_directory(root_path)
            self.scan_finished.emit(self.index.root_path, self.index.stats())
        except ScanError as e:
            logger.warning("Scan failed for %s: %s", root_path, e)
            self.scan_failed.emit(root_path, str(e))
        except Exception as e:
            logger.exception("Worker error while scanning %s", root_path)
            self.scan_failed.emit(root_path, f"{type(e).__name__}: {e}")
        finally:
            self.is_busy = False

    def rescan(self, path):
        if self.index is None:
            return
        self.is_busy = True
        try:
            self.index.rescan(path)
        except (ScanError, SubtreeNotFoundError) as e:
            # 后续的 fetch 会报告失败，这里只记录
            logger.warning("Rescan failed for %s: %s", path, e)
        except Exception:
            logger.exception("Worker error while rescanning %s", path)
        finally:
            self.is_busy = False

    def fetch_subtree(self, path, depth, generation):
        if self.index is None:
            self.fetch_failed.emit(generation, f"No scan loaded for {path}")
            return
        try:
            node = self.index.fetch_subtree(path, depth)
        except SubtreeNotFoundError as e:
            logger.warning("Fetch failed for %s: not found", e)
            self.fetch_failed.emit(generation, f"Path not found: {path}")
            return
        except Exception as e:
            logger.exception("Worker error while fetching %s", path)
            self.fetch_failed.emit(generation, f"{type(e).__name__}: {e}")
            return
        self.subtree_ready.emit(generation, node)
