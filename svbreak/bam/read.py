from . import cigar as _cigar
from ..constants import READ_TAG, SAMPLE
from ..error import MissingTagError


def get_tag_list(read, tag, cast_type=str):
    """
    reads a comma delimited tag into a list

    Args:
        read (pysam.AlignedSegment): the read
        tag (str): the tag name
        cast_type (callable): type to cast each element to

    Raises:
        MissingTagError: the read does not have the tag

    Example:
        >>> read.set_tag('AL', '10,200')
        >>> get_tag_list(read, 'AL', int)
        [10, 200]
    """
    if not read.has_tag(tag):
        raise MissingTagError(
            'read is missing the {} tag. It must be set by the contig alignment step'.format(tag), read.query_name)
    value = read.get_tag(tag)
    if isinstance(value, (list, tuple)):
        return [cast_type(v) for v in value]
    return [cast_type(v) for v in str(value).split(',') if v != '']


def read_sample(read):
    """
    Returns:
        SAMPLE: the sample the read was sequenced from, taken from the prefix of the SR tag
    """
    return SAMPLE(get_tag_list(read, READ_TAG.SAMPLE_READ)[0][0])


def read_identifier(read):
    """
    Returns:
        str: the sample prefixed read name if available, otherwise the query name
    """
    if read.has_tag(READ_TAG.SAMPLE_READ):
        return str(read.get_tag(READ_TAG.SAMPLE_READ))
    return read.query_name


def contig_positions(read, contig_name):
    """
    Returns:
        :class:`list` of :class:`int`: the 0-based start positions of the read on the given contig

    Raises:
        MissingTagError: the read is missing the contig name or alignment position tags
    """
    contigs = get_tag_list(read, READ_TAG.CONTIG)
    positions = get_tag_list(read, READ_TAG.ALIGNMENT, int)
    if len(contigs) != len(positions):
        raise MissingTagError('the {} and {} tags must have the same number of entries'.format(
            READ_TAG.CONTIG, READ_TAG.ALIGNMENT), read.query_name, contigs, positions)
    return [pos for name, pos in zip(contigs, positions) if name == contig_name]


def contig_alignment_span(read):
    """
    the part of the original (contig) sequence covered by the alignment, in the orientation of the contig
    rather than the orientation stored in the alignment record

    Returns:
        tuple of int and int: 0-based start (inclusive) and end (exclusive) positions on the contig
    """
    leading, trailing = _cigar.clipping(read.cigar)
    total = _cigar.query_length(read.cigar)
    aligned = total - leading - trailing
    if read.is_reverse:
        return trailing, trailing + aligned
    return leading, leading + aligned


def edit_distance(read):
    """
    Returns:
        int: the NM tag value, -1 if it was not set
    """
    if read.has_tag(READ_TAG.EDIT_DISTANCE):
        return int(read.get_tag(READ_TAG.EDIT_DISTANCE))
    return -1


def sub_alignment_count(read):
    """
    Returns:
        int: the number of competing alignments listed in the bwa XA tag

    Example:
        >>> read.set_tag('XA', '1,+100,50M,0;2,-400,50M,1;')
        >>> sub_alignment_count(read)
        2
    """
    if not read.has_tag(READ_TAG.ALT_HITS):
        return 0
    return len([hit for hit in str(read.get_tag(READ_TAG.ALT_HITS)).split(';') if hit])


def match_length(read):
    return _cigar.alignment_matches(read.cigar)
