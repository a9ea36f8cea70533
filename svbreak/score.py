"""
annotate and score batches of breakpoints
"""
from concurrent import futures
import logging
import threading

from .util import LOG, dedup_breakpoints


class SerializedReference:
    """
    wraps a reference sequence handle so that it can be shared between threads. pysam file handles are not
    thread safe so fetches are made one at a time
    """

    def __init__(self, reference):
        self.reference = reference
        self.references = tuple(reference.references)
        self._lock = threading.Lock()

    def fetch(self, chr_name, start, end):
        with self._lock:
            return self.reference.fetch(chr_name, start, end)


def process_breakpoint(
    bp, reference=None, viral_reference=None, tumor_coverage=None, normal_coverage=None,
    blacklist=None, pon=None, dbsnp=None, repeats=None, tumor_cigars=None, normal_cigars=None, discordant=None
):
    """
    collect the remaining evidence for a single breakpoint and score it. Every input is optional and
    the corresponding annotation is skipped when it is not given

    Args:
        bp (BreakPoint): the breakpoint, modified in place
        reference: the reference genome (pysam.FastaFile-like)
        viral_reference: reference for sequences not found in the reference genome
        tumor_coverage: tumor base-pair coverage (anything with coverage_at)
        normal_coverage: normal base-pair coverage
        blacklist (RegionCollection): regions where indels are flagged
        pon (dict of int by str): panel of normals counts by hash string
        dbsnp (dict of str by str): dbSNP ids by hash string
        repeats (dict of str by str): known repeat sequences by hash string
        tumor_cigars (dict of int by str): tumor reads whose alignment contains the indel, by hash string
        normal_cigars (dict of int by str): normal reads whose alignment contains the indel, by hash string
        discordant (dict of DiscordantCluster): discordant clusters to merge with

    Returns:
        BreakPoint: the input breakpoint
    """
    if discordant:
        bp.combine_with_discordant_cluster(discordant)
    bp.add_cigar_support(tumor_cigars, normal_cigars)
    if reference is not None:
        bp.set_ref_alt(reference, viral_reference)
        if bp.isindel:
            bp.find_repeat(reference, viral_reference)
    if repeats:
        bp.check_repeat(repeats)
    bp.add_allelic_fraction(tumor_coverage, normal_coverage)
    if blacklist is not None:
        bp.check_blacklist(blacklist)
    if pon:
        bp.check_pon(pon)
    if dbsnp:
        bp.check_dbsnp(dbsnp)
    bp.score_breakpoint()
    LOG(bp.to_print_string(), bp.evidence, bp.confidence, level=logging.DEBUG)
    return bp


def score_breakpoints(bps, workers=1, **inputs):
    """
    annotate and score the breakpoints, then sort and remove duplicates. Breakpoints without any supporting
    evidence are dropped before scoring

    Args:
        bps (:class:`list` of :class:`~svbreak.breakpoint.BreakPoint`): the breakpoints
        workers (int): the number of threads to score with
        **inputs: passed to :func:`process_breakpoint`

    Returns:
        :class:`list` of :class:`~svbreak.breakpoint.BreakPoint`: the scored, sorted and deduplicated breakpoints
    """
    for name in ['reference', 'viral_reference']:
        if inputs.get(name) is not None and not isinstance(inputs[name], SerializedReference):
            inputs[name] = SerializedReference(inputs[name])

    minimal = [bp for bp in bps if bp.has_minimal()]
    if len(minimal) < len(bps):
        LOG('dropped', len(bps) - len(minimal), 'breakpoints without supporting evidence')
    LOG('scoring', len(minimal), 'breakpoints using', workers, 'thread(s)', time_stamp=True)

    if workers > 1:
        with futures.ThreadPoolExecutor(max_workers=workers) as pool:
            jobs = [pool.submit(process_breakpoint, bp, **inputs) for bp in minimal]
            scored = [job.result() for job in jobs]
    else:
        scored = [process_breakpoint(bp, **inputs) for bp in minimal]

    result = dedup_breakpoints(scored)
    LOG('removed', len(scored) - len(result), 'duplicate breakpoints')
    return result
