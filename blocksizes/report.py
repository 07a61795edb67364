from blocksizes.config import PTR_SIZE, MIN_CAPACITY
from blocksizes.block_table import BlockTable, InvalidConfiguration


def _format_bool(value):
    return "true" if value else "false"


def report_lines(table):
    """
    Build the diagnostic report for a block table
    Args:
        table (BlockTable): table to describe
    Returns:
        list: report lines, without trailing newlines
    """
    total_size = table.total_size()
    return [
        f"PTR_SIZE: {table.ptr_size}",
        f"MAX_CAPACITY: {table.max_capacity}",
        f"MIN_CAPACITY: {table.min_capacity}",
        f"blockSizes: [{', '.join(str(size) for size in table.block_sizes)}]",
        f"blockSizes.length: {table.length()}",
        f"total size: {total_size}",
        f"total size === MAX_CAPACITY: {_format_bool(total_size == table.max_capacity)}",
    ]


def main(ptr_size=PTR_SIZE, min_capacity=MIN_CAPACITY):
    try:
        table = BlockTable(ptr_size, min_capacity)
    except InvalidConfiguration as e:
        print(f"Error: {e}")
        return 1

    for line in report_lines(table):
        print(line)
    return 0
