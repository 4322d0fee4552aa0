from snsseq.data.summits import WindowCount


def make_window(name, start, counts, origin=(0, 100), chrom="chr1", width=50):
    """WindowCount helper: window [start, start + width) inside origin."""
    return WindowCount(
        origin_name=name,
        origin_start=origin[0],
        origin_end=origin[1],
        window_start=start,
        window_end=start + width,
        sample_counts=tuple(counts),
        chrom=chrom,
    )
