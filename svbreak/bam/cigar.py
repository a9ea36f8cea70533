"""
holds methods related to processing cigar tuples. Cigar tuples are generally
an iterable list of tuples where the first element in each tuple is the
CIGAR value (i.e. 1 for an insertion), and the second value is the frequency
"""
from ..constants import CIGAR

EVENT_STATES = {CIGAR.D, CIGAR.I}
ALIGNED_STATES = {CIGAR.M, CIGAR.X, CIGAR.EQ}
REFERENCE_ALIGNED_STATES = ALIGNED_STATES | {CIGAR.D, CIGAR.N}
QUERY_ALIGNED_STATES = ALIGNED_STATES | {CIGAR.I, CIGAR.S}
CLIPPING_STATE = {CIGAR.S, CIGAR.H}


def alignment_matches(cigar):
    """
    counts the number of aligned bases irrespective of match/mismatch
    this is equivalent to counting all CIGAR.M

    Example:
        >>> alignment_matches([(CIGAR.S, 5), (CIGAR.EQ, 10), (CIGAR.X, 1), (CIGAR.D, 3), (CIGAR.M, 4)])
        15
    """
    result = 0
    for state, freq in cigar:
        if state in ALIGNED_STATES:
            result += freq
    return result


def clipping(cigar):
    """
    Returns:
        tuple of int and int: the number of clipped (soft or hard) bases at the start and at the end of the cigar
    """
    leading = 0
    for state, freq in cigar:
        if state not in CLIPPING_STATE:
            break
        leading += freq
    trailing = 0
    for state, freq in cigar[::-1]:
        if state not in CLIPPING_STATE:
            break
        trailing += freq
    return leading, trailing


def query_length(cigar, hard_clipped=True):
    """
    the length of the original query sequence described by the cigar

    Args:
        cigar (list): the cigar tuples
        hard_clipped (bool): include hard clipped bases (not present in the stored sequence)
    """
    states = QUERY_ALIGNED_STATES | ({CIGAR.H} if hard_clipped else set())
    return sum([freq for state, freq in cigar if state in states])


def indel_events(cigar, reference_start):
    """
    lists the insertion and deletion events of an alignment

    Args:
        cigar (list): the cigar tuples
        reference_start (int): the 0-based start of the alignment on the reference

    Returns:
        :class:`list` of :class:`tuple`: (state, reference position, query position, length) where the positions
        are 0-based and point at the first deleted reference base (deletions) or the first inserted
        query base (insertions). Query positions exclude hard clipped bases

    Example:
        >>> indel_events([(CIGAR.M, 10), (CIGAR.D, 3), (CIGAR.M, 5)], 100)
        [(2, 110, 10, 3)]
    """
    ref_pos = reference_start
    query_pos = 0
    events = []
    for state, freq in cigar:
        if state in EVENT_STATES:
            events.append((state, ref_pos, query_pos, freq))
        if state in QUERY_ALIGNED_STATES:
            query_pos += freq
        if state in REFERENCE_ALIGNED_STATES:
            ref_pos += freq
    return events

