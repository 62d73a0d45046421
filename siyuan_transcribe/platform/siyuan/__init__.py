"""SiYuan kernel adapter implementations."""

from siyuan_transcribe.platform.siyuan.kernel import DEFAULT_KERNEL_URL, SiYuanKernelClient, is_block_id

__all__ = ["DEFAULT_KERNEL_URL", "SiYuanKernelClient", "is_block_id"]
