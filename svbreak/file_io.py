"""
loaders for the reference files used to annotate and filter breakpoints
"""
import pysam

from .interval import GenomicRegion, RegionCollection
from .util import LOG


def load_reference_genome(filepath):
    """
    Args:
        filepath (str): path to the (indexed or indexable) fasta file

    Returns:
        pysam.FastaFile: the open reference
    """
    LOG('loading:', filepath)
    return pysam.FastaFile(filepath)


def load_blacklist(filepath, references):
    """
    reads a bed file of regions to be excluded. Rows on chromosomes not in the references are skipped

    For example:

    .. code-block:: text

        #chr    start   end
        chr20	25600000	27500000

    Args:
        filepath (str): path to the bed file (0-based start, exclusive end)
        references (list of str): reference names by reference id

    Returns:
        RegionCollection: the regions (1-based inclusive) by reference id

    Raises:
        ValueError: a row has fewer than 3 columns or non-integer positions
    """
    ref_ids = {name: index for index, name in enumerate(references)}
    rows = []
    skipped = 0
    LOG('loading:', filepath)
    with open(filepath, 'r') as fh:
        for line in fh:
            if not line.strip() or line.startswith('#') or line.startswith('track') or line.startswith('browser'):
                continue
            row = line.rstrip('\r\n').split('\t')
            if len(row) < 3:
                raise ValueError('expected at least 3 columns in the bed file', filepath, line)
            if row[0] not in ref_ids:
                skipped += 1
                continue
            rows.append(GenomicRegion(ref_ids[row[0]], int(row[1]) + 1, int(row[2])))
    regions = RegionCollection(rows)
    LOG('loaded', len(regions), 'blacklist regions', '(skipped {} on unknown chromosomes)'.format(skipped) if skipped else '')
    return regions


def load_lookup(filepath, cast_type=str):
    """
    reads a two column tab delimited file of breakpoint hash string and value (panel of normals counts,
    dbSNP ids, repeat sequences, cigar counts)

    Example:
        >>> load_lookup('pon.txt', int)
        {'0_100_D': 4, '0_5000_I': 1}
    """
    lookup = {}
    LOG('loading:', filepath)
    with open(filepath, 'r') as fh:
        for line in fh:
            if not line.strip() or line.startswith('#'):
                continue
            row = line.rstrip('\r\n').split('\t')
            if len(row) < 2:
                raise ValueError('expected 2 columns in the lookup file', filepath, line)
            lookup[row[0]] = cast_type(row[1])
    LOG('loaded', len(lookup), 'entries')
    return lookup


def load_pon(filepath):
    return load_lookup(filepath, int)
