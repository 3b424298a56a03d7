import sys
import os
import logging

import psutil

logger = logging.getLogger(__name__)


def list_drives():
    """列出可扫描的挂载点及其容量，无法访问的分区 (如空光驱) 会被跳过"""
    drives = []
    for part in psutil.disk_partitions(all=False):
        try:
            usage = psutil.disk_usage(part.mountpoint)
        except (PermissionError, OSError) as e:
            logger.debug("Skipping %s: %s", part.mountpoint, e)
            continue
        drives.append({
            'mountpoint': part.mountpoint,
            'device': part.device,
            'fstype': part.fstype,
            'total': usage.total,
            'used': usage.used,
            'free': usage.free,
            'percent': usage.percent,
        })
    return drives


def set_process_priority():
    """把本进程优先级设为"低于标准"，扫描时不影响前台程序"""
    try:
        p = psutil.Process(os.getpid())
        if sys.platform == 'win32':
            p.nice(psutil.BELOW_NORMAL_PRIORITY_CLASS)
        else:
            p.nice(10)
    except (psutil.Error, OSError) as e:
        logger.debug("Could not lower process priority: %s", e)
