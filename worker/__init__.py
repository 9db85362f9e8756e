"""外部命令：容器存储清理、虚拟磁盘压缩"""
