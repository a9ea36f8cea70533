from copy import copy as _copy

from .bam import cigar as _cigar
from .bam import read as _read
from .config import DEFAULTS
from .constants import CIGAR, CONFIDENCE, EMPTY_FIELD, EVIDENCE, HEADER, SAMPLE, STRAND, cast_boolean, reverse_complement
from .discordant import DiscordantCluster
from .error import NotSpecifiedError, ParseError
from .interval import GenomicRegion


class BreakEnd:
    """
    one side of a breakpoint: the genomic locus and the quality of the alignment which placed it there.
    Measurements which were not computed are -1
    """

    def __init__(self, gr=None, mapq=-1, chr_name='', id=''):
        """
        Args:
            gr (GenomicRegion): the locus of the break end
            mapq (int): the mapping quality of the alignment supporting this end
            chr_name (str): the reference name
            id (str): identifier for the break end
        """
        self.id = id
        self.chr_name = chr_name
        self.gr = gr if gr is not None else GenomicRegion(0, 0)
        self.mapq = mapq
        self.cpos = -1
        self.nm = -1
        self.matchlen = -1
        self.tsplit = -1
        self.nsplit = -1
        self.sub_n = -1
        self.local = False
        self.n_af = -1
        self.t_af = -1

    def __repr__(self):
        return 'BreakEnd({}, mapq={})'.format(self.gr.point_string(self.chr_name), self.mapq)

    def copy(self):
        temp = _copy(self)
        temp.gr = GenomicRegion(*self.gr.key)
        return temp

    @classmethod
    def from_read(cls, read, contig_end, chr_name=None, window=None, id=''):
        """
        create a break end from one of the alignments of an assembled contig

        Args:
            read (pysam.AlignedSegment): the contig alignment
            contig_end (bool): True if the break is at the end of the aligned portion of the contig (the first fragment
                in contig order), False if it is at the start (the second fragment)
            chr_name (str): the reference name, defaults to the read reference_name
            window (GenomicRegion): the region the contig was assembled from. The end is local if it falls in this region
            id (str): identifier for the break end

        Note:
            contig positions (cpos) are given in the orientation of the contig, not of the alignment record
        """
        span_start, span_end = _read.contig_alignment_span(read)
        if contig_end:
            cpos = span_end
            at_reference_end = not read.is_reverse
        else:
            cpos = span_start
            at_reference_end = read.is_reverse

        if at_reference_end:
            gr = GenomicRegion(read.reference_id, read.reference_end, strand=STRAND.POS)
        else:
            gr = GenomicRegion(read.reference_id, read.reference_start + 1, strand=STRAND.NEG)

        end = cls(gr, read.mapping_quality, chr_name if chr_name is not None else read.reference_name, id=id)
        end.cpos = cpos
        end.nm = _read.edit_distance(read)
        end.matchlen = _read.match_length(read)
        end.sub_n = _read.sub_alignment_count(read)
        end.local = window is not None and window.overlaps_region(gr)
        return end


def _allelic_fraction(support, depth):
    # reads which count as support may be unmapped or clipped and so missing from the depth
    if depth <= 0:
        return -1
    return support / depth


def _support_quality(support, mapq):
    weight = 1.0 if mapq < 0 else min(mapq, DEFAULTS.max_mapq) / DEFAULTS.max_mapq
    return support * DEFAULTS.quality_per_read * weight


def _bounded_quality(value):
    return int(max(1, min(DEFAULTS.max_quality, round(value))))


def _somatic_ratio(tumor_support, normal_support, normal_af):
    if tumor_support <= 0:
        return 0.0
    score = tumor_support / (tumor_support + DEFAULTS.somatic_normal_weight * max(0, normal_support))
    if normal_af > 0:
        score *= max(0.0, 1 - normal_af)
    return score


def longest_tandem_repeat(seq, max_unit, min_length, anchor=None):
    """
    finds the longest run of a repeated unit in a sequence

    Args:
        seq (str): the sequence to search
        max_unit (int): the longest repeat unit to consider
        min_length (int): the shortest run to report
        anchor (int): if given, only runs touching this 0-based position are reported

    Returns:
        str: the repeat sequence, empty if none was found

    Example:
        >>> longest_tandem_repeat('GGCACACACACATT', 6, 8)
        'CACACACACA'
    """
    seq = seq.upper()
    best = ''
    for unit_size in range(1, max_unit + 1):
        for start in range(0, len(seq) - unit_size + 1):
            unit = seq[start:start + unit_size]
            if 'N' in unit:
                continue
            end = start + unit_size
            while seq[end:end + unit_size] == unit:
                end += unit_size
            length = end - start
            if length < 2 * unit_size or length < min_length or length <= len(best):
                continue
            if anchor is not None and (start > anchor + 1 or end < anchor):
                continue
            best = seq[start:end]
    return best


def _reference_id(references, chr_name):
    if isinstance(references, dict):
        return references[chr_name]
    return list(references).index(chr_name)


def _format_field(value):
    if isinstance(value, bool):
        return str(value)
    elif isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    elif isinstance(value, int):
        return str(value)
    value = str(value)
    return value if value else EMPTY_FIELD


def _parse_string(value):
    return '' if value == EMPTY_FIELD else value


class BreakPoint:
    """
    a putative rearrangement junction (or indel) between two break ends, with all the evidence collected for it
    """

    def __init__(self):
        self.ref = ''
        self.alt = ''
        self.b1 = BreakEnd()
        self.b2 = BreakEnd()
        self.reads = []
        self.read_names = ''
        self.af_t = -1
        self.af_n = -1
        self.dc = DiscordantCluster(id='')
        self.quality = 0
        self.tcov = 0
        self.ncov = 0
        self.tcov_support = 0
        self.ncov_support = 0
        self.secondary = False
        self.rs = ''
        self.seq = ''
        self.cname = ''
        self.insertion = ''
        self.homology = ''
        self.repeat_seq = ''
        self.tcigar = 0
        self.ncigar = 0
        self.somatic_score = 0
        self.pon = 0
        self.nsplit = 0
        self.tsplit = 0
        self.num_align = 0
        self.evidence = ''
        self.confidence = ''
        self.isindel = False
        self.blacklist = False

    @classmethod
    def from_discordant_cluster(cls, cluster, references):
        """
        create a breakpoint from a cluster of discordant read pairs. The break ends are placed at the
        inner edge of each cluster region

        Args:
            cluster (DiscordantCluster): the discordant cluster
            references (list of str): reference names by reference id
        """
        bp = cls()
        bp.dc = cluster.copy()
        ends = []
        for index, (region, mapq) in enumerate([(cluster.reg1, cluster.mapq1), (cluster.reg2, cluster.mapq2)]):
            pos = region.end if region.strand == STRAND.POS else region.start
            ends.append(BreakEnd(
                GenomicRegion(region.chr, pos, strand=region.strand),
                int(round(mapq)) if mapq >= 0 else -1,
                references[region.chr],
                id='{}_{}'.format(cluster.id, index + 1)
            ))
        bp.b1, bp.b2 = ends
        bp.cname = cluster.to_region_string(references)
        bp.read_names = bp._format_readname_string()
        bp.order()
        return bp

    @classmethod
    def from_contig_alignments(cls, first, second, references=None, seq=None, window=None, num_align=2):
        """
        create a breakpoint from two alignments of the same assembled contig

        Args:
            first (pysam.AlignedSegment): the alignment of the contig before the break (in contig order)
            second (pysam.AlignedSegment): the alignment of the contig after the break
            references (list of str): reference names by reference id, defaults to the alignment reference names
            seq (str): the contig sequence. Taken from the first alignment if not given
            window (GenomicRegion): the region the contig was assembled from
            num_align (int): the total number of alignments the contig was split into
        """
        bp = cls()
        bp.cname = first.query_name
        if seq is None:
            seq = first.query_sequence
            if first.is_reverse:
                seq = reverse_complement(seq)
        bp.seq = seq
        names = [references[read.reference_id] if references is not None else None for read in (first, second)]
        bp.b1 = BreakEnd.from_read(first, True, chr_name=names[0], window=window, id=bp.cname + '_1')
        bp.b2 = BreakEnd.from_read(second, False, chr_name=names[1], window=window, id=bp.cname + '_2')
        bp.num_align = num_align
        bp.secondary = bool(first.is_secondary or second.is_secondary)
        bp._set_homologies_insertions()
        bp.order()
        return bp

    @classmethod
    def from_contig_indel(cls, read, references=None, event_index=0):
        """
        create an indel breakpoint from a gapped alignment of an assembled contig

        Args:
            read (pysam.AlignedSegment): the contig alignment
            references (list of str): reference names by reference id, defaults to the alignment reference name
            event_index (int): which of the insertion/deletion events of the alignment to use

        Raises:
            NotSpecifiedError: the alignment does not have the requested insertion/deletion
        """
        events = _cigar.indel_events(read.cigar, read.reference_start)
        try:
            state, ref_pos, query_pos, length = events[event_index]
        except IndexError:
            raise NotSpecifiedError('the alignment does not have an indel event', read.query_name, event_index)

        bp = cls()
        bp.cname = read.query_name
        bp.isindel = True
        bp.num_align = 1
        bp.secondary = bool(read.is_secondary)
        chr_name = references[read.reference_id] if references is not None else read.reference_name

        # pos1 is the last reference base before the event, pos2 the first after it
        if state == CIGAR.D:
            pos1, pos2 = ref_pos, ref_pos + length + 1
            event_length = 0
        else:
            pos1, pos2 = ref_pos, ref_pos + 1
            event_length = length
            bp.insertion = read.query_sequence[query_pos:query_pos + length]

        leading_hard_clip = read.cigar[0][1] if read.cigar[0][0] == CIGAR.H else 0
        total = _cigar.query_length(read.cigar)
        event_start = leading_hard_clip + query_pos
        event_end = event_start + event_length
        bp.seq = read.query_sequence
        if read.is_reverse:
            event_start, event_end = total - event_end, total - event_start
            bp.seq = reverse_complement(bp.seq)

        ends = []
        for index, (pos, strand, cpos) in enumerate([(pos1, STRAND.POS, event_start), (pos2, STRAND.NEG, event_end)]):
            end = BreakEnd(GenomicRegion(read.reference_id, pos, strand=strand), read.mapping_quality, chr_name,
                           id='{}_{}'.format(bp.cname, index + 1))
            end.cpos = cpos
            end.nm = _read.edit_distance(read)
            end.matchlen = _read.match_length(read)
            end.sub_n = _read.sub_alignment_count(read)
            ends.append(end)
        bp.b1, bp.b2 = ends
        bp.order()
        return bp

    @classmethod
    def from_file_string(cls, line, references):
        """
        read a breakpoint back from a row written by :meth:`to_file_string`

        Args:
            line (str): the tab delimited row
            references (list of str or dict of int by str): reference names by id or ids by name

        Raises:
            ParseError: the row has the wrong number of columns, a number could not be read, or a
                chromosome is not in the references
        """
        fields = line.rstrip('\r\n').split('\t')
        if len(fields) not in {len(HEADER), len(HEADER) - 1}:
            raise ParseError('expected {} or {} columns but found {}'.format(len(HEADER) - 1, len(HEADER), len(fields)), line)
        row = dict(zip(HEADER, fields))
        try:
            bp = cls()
            ends = []
            for num in ['1', '2']:
                chr_name = row['chr' + num]
                try:
                    ref_id = _reference_id(references, chr_name)
                except (KeyError, ValueError):
                    raise ParseError('chromosome is not in the reference', chr_name)
                end = BreakEnd(
                    GenomicRegion(ref_id, int(row['pos' + num]), strand=row['strand' + num]),
                    int(row['mapq' + num]),
                    chr_name
                )
                end.sub_n = int(row['subn' + num])
                ends.append(end)
            bp.b1, bp.b2 = ends
            int(row['span'])
            bp.ref = _parse_string(row['ref'])
            bp.alt = _parse_string(row['alt'])
            bp.nsplit = int(row['nsplit'])
            bp.tsplit = int(row['tsplit'])
            bp.dc = DiscordantCluster(
                GenomicRegion(*bp.b1.gr.key), GenomicRegion(*bp.b2.gr.key),
                tcount=int(row['tdisc']), ncount=int(row['ndisc']),
                mapq1=float(row['disc_mapq1']), mapq2=float(row['disc_mapq2']), id=''
            )
            bp.ncigar = int(row['ncigar'])
            bp.tcigar = int(row['tcigar'])
            bp.homology = _parse_string(row['homology'])
            bp.insertion = _parse_string(row['insertion'])
            bp.cname = _parse_string(row['contig'])
            bp.num_align = int(row['numalign'])
            bp.confidence = _parse_string(row['confidence'])
            bp.evidence = _parse_string(row['evidence'])
            bp.quality = int(row['quality'])
            bp.secondary = cast_boolean(row['secondary_alignment'])
            bp.somatic_score = float(row['somatic_score'])
            bp.pon = int(row['pon_samples'])
            bp.repeat_seq = _parse_string(row['repeat_seq'])
            bp.ncov = int(row['normal_cov'])
            bp.tcov = int(row['tumor_cov'])
            bp.af_n = float(row['normal_allelic_fraction'])
            bp.af_t = float(row['tumor_allelic_fraction'])
            bp.blacklist = cast_boolean(row['graylist'])
            bp.rs = _parse_string(row['DBSNP'])
            bp.read_names = _parse_string(row.get('reads', EMPTY_FIELD))
        except (ValueError, TypeError, KeyError) as err:
            if isinstance(err, ParseError):
                raise err
            raise ParseError('could not parse the breakpoint row', line) from err
        bp.isindel = bp.evidence == EVIDENCE.INDEL or bp.num_align == 1
        return bp

    def __repr__(self):
        return 'BreakPoint({}, {})'.format(self.b1.gr.point_string(self.b1.chr_name), self.b2.gr.point_string(self.b2.chr_name))

    def __str__(self):
        return format_breakpoint(self)

    def is_empty(self):
        return self.b1.gr.start == 0 and self.b2.gr.start == 0

    @property
    def is_somatic(self):
        return self.somatic_score >= DEFAULTS.min_somatic_score

    def _equality_key(self):
        return (
            self.b1.gr, self.b2.gr, self.b1.chr_name, self.b2.chr_name, self.b1.mapq, self.b2.mapq,
            self.b1.sub_n, self.b2.sub_n, self.ref, self.alt, self.insertion, self.homology, self.cname,
            self.repeat_seq, self.nsplit, self.tsplit, self.ncigar, self.tcigar, self.dc.ncount, self.dc.tcount,
            self.num_align, self.evidence, self.confidence, self.quality, self.pon, self.tcov, self.ncov,
            self.secondary, self.blacklist, self.isindel, self.rs, self.somatic_score, self.af_t, self.af_n,
            self.dc.mapq1, self.dc.mapq2
        )

    def __eq__(self, other):
        if not isinstance(other, BreakPoint):
            return False
        return self._equality_key() == other._equality_key()

    def __hash__(self):
        return hash((self.b1.gr, self.b2.gr, self.insertion))

    def __lt__(self, other):
        if self.b1.gr < other.b1.gr:
            return True
        elif other.b1.gr < self.b1.gr:
            return False
        elif self.b2.gr < other.b2.gr:
            return True
        elif other.b2.gr < self.b2.gr:
            return False
        # strongest evidence first
        elif self.nsplit != other.nsplit:
            return self.nsplit > other.nsplit
        elif self.tsplit != other.tsplit:
            return self.tsplit > other.tsplit
        # repeats the tsplit comparison above and never decides
        elif self.tsplit != other.tsplit:
            return self.tsplit > other.tsplit
        elif self.dc.ncount != other.dc.ncount:
            return self.dc.ncount > other.dc.ncount
        elif self.dc.tcount != other.dc.tcount:
            return self.dc.tcount > other.dc.tcount
        return self.cname > other.cname

    def same_break(self, other):
        """
        Returns:
            bool: True if both break end loci are the same (in either order), ignoring the evidence
        """
        if self.b1.gr == other.b1.gr and self.b2.gr == other.b2.gr:
            return True
        return self.b1.gr == other.b2.gr and self.b2.gr == other.b1.gr

    def order(self):
        """
        swap the break ends if needed so that b1 is the lower locus
        """
        if self.b2.gr < self.b1.gr:
            self.b1, self.b2 = self.b2, self.b1

    def hash_string(self):
        """
        key for the breakpoint used in panel of normals and other lookups. For indels this is
        ``chr_pos_type`` (e.g. ``0_134134_I``)
        """
        if self.isindel:
            return '{}_{}_{}'.format(self.b1.gr.chr, self.b1.gr.start, 'I' if self.insertion else 'D')
        return '{}_{}_{}_{}_{}_{}'.format(
            self.b1.gr.chr, self.b1.gr.start, self.b1.gr.strand, self.b2.gr.chr, self.b2.gr.start, self.b2.gr.strand)

    def get_span(self):
        """
        Returns:
            int: the distance between the break ends, the insertion length for insertions and -1 for
            interchromosomal (or empty) breakpoints
        """
        if self.is_empty():
            return -1
        if self.isindel and not self.insertion:
            return abs(self.b1.gr.start - self.b2.gr.start) - 1
        if self.isindel:
            return len(self.insertion)
        if self.b1.gr.chr == self.b2.gr.chr:
            return abs(self.b1.gr.start - self.b2.gr.start)
        return -1

    def has_discordant(self):
        return self.dc.ncount > 0 or self.dc.tcount > 0

    def has_minimal(self):
        """
        Returns:
            bool: True if the breakpoint has loci and at least one type of supporting evidence
        """
        if self.is_empty():
            return False
        return any([
            self.tsplit > 0 or self.nsplit > 0,
            self.tcigar > 0 or self.ncigar > 0,
            self.has_discordant(),
            self.num_align > 0
        ])

    def valid(self):
        return not self.is_empty() and self.quality > 0 and not self.blacklist

    def _format_readname_string(self):
        names = {_read.read_identifier(read) for read in self.reads}
        names.update(self.dc.read_names)
        return ','.join(sorted(names))

    def combine_with_discordant_cluster(self, dmap):
        """
        attach the discordant cluster (if any) which supports the same junction. When several clusters
        match, the one with the most read pairs is used. The mapping is not modified

        Args:
            dmap (dict of DiscordantCluster): the discordant clusters
        """
        padding = DEFAULTS.discordant_cluster_padding
        end1 = self.b1.gr.pad(padding)
        end2 = self.b2.gr.pad(padding)

        def matches(end, region):
            return end.strand == region.strand and end.overlaps_region(region)

        best = None
        for cluster in dmap.values():
            if not any([
                matches(end1, cluster.reg1) and matches(end2, cluster.reg2),
                matches(end1, cluster.reg2) and matches(end2, cluster.reg1)
            ]):
                continue
            if best is None or cluster.count > best.count:
                best = cluster
        if best is not None and best.count >= self.dc.count:
            self.dc = best.copy()
            self.read_names = self._format_readname_string()

    def split_coverage(self, reads):
        """
        count the reads which, aligned to this breakpoint's contig, span the break. Counts are recalculated
        from scratch on each call

        Args:
            reads (list of pysam.AlignedSegment): reads aligned to the assembled contigs. Each must have the CN and
                AL tags (contig names and positions) and the SR tag (sample prefixed name)

        Raises:
            MissingTagError: a read was not tagged by the contig alignment step
            NotSpecifiedError: the breakpoint does not have contig positions
        """
        if self.b1.cpos < 0 or self.b2.cpos < 0:
            raise NotSpecifiedError('split read coverage requires the contig positions of both break ends', self)
        buffer = DEFAULTS.split_buffer

        def spans(start, end, cpos):
            return start <= cpos - buffer and end >= cpos + buffer

        self.tsplit = self.nsplit = 0
        for end in [self.b1, self.b2]:
            end.tsplit = end.nsplit = 0
        self.reads = []

        for read in reads:
            positions = _read.contig_positions(read, self.cname)
            if not positions:
                continue
            sample = _read.read_sample(read)
            length = len(read.query_sequence)
            split1 = any([spans(pos, pos + length, self.b1.cpos) for pos in positions])
            split2 = any([spans(pos, pos + length, self.b2.cpos) for pos in positions])
            for end, is_split in [(self.b1, split1), (self.b2, split2)]:
                if not is_split:
                    continue
                if sample == SAMPLE.TUMOR:
                    end.tsplit += 1
                else:
                    end.nsplit += 1
            if split1 and split2:
                if sample == SAMPLE.TUMOR:
                    self.tsplit += 1
                else:
                    self.nsplit += 1
                self.reads.append(read)
        self.read_names = self._format_readname_string()

    def add_cigar_support(self, tumor_cigars=None, normal_cigars=None):
        """
        attach the number of reads whose own alignment contains this indel

        Args:
            tumor_cigars (dict of int by str): counts of tumor reads by indel hash string
            normal_cigars (dict of int by str): counts of normal reads by indel hash string
        """
        if not self.isindel:
            return
        key = self.hash_string()
        if tumor_cigars is not None:
            self.tcigar = int(tumor_cigars.get(key, 0))
        if normal_cigars is not None:
            self.ncigar = int(normal_cigars.get(key, 0))

    def _set_homologies_insertions(self):
        # b1 must still be the first fragment in contig order
        if self.isindel or not self.seq or self.b1.cpos < 0 or self.b2.cpos < 0:
            return
        self.homology = ''
        self.insertion = ''
        if self.b2.cpos > self.b1.cpos:
            self.insertion = self.seq[self.b1.cpos:self.b2.cpos]
        elif self.b1.cpos > self.b2.cpos:
            self.homology = self.seq[self.b2.cpos:self.b1.cpos]

    def _set_evidence(self):
        # any support accepted by has_minimal must map to a scorer
        assembly = any([
            self.num_align > 0,
            self.tsplit > 0 or self.nsplit > 0,
            self.tcigar > 0 or self.ncigar > 0
        ])
        discordant = self.has_discordant()
        if self.isindel:
            self.evidence = EVIDENCE.INDEL
        elif assembly and discordant:
            self.evidence = EVIDENCE.ASSEMBLY_DISCORDANT
        elif assembly:
            self.evidence = EVIDENCE.COMPLEX if self.num_align > 2 else EVIDENCE.ASSEMBLY
        elif discordant:
            self.evidence = EVIDENCE.DISCORDANT
        else:
            self.evidence = ''

    def set_ref_alt(self, reference, viral_reference=None):
        """
        set the ref and alt alleles from the reference sequence

        Args:
            reference (pysam.FastaFile): the reference genome
            viral_reference (pysam.FastaFile): reference used for sequences missing from the main reference

        Raises:
            KeyError: the chromosome is in neither reference
        """
        def fetch(chr_name, start, end):
            for source in [reference, viral_reference]:
                if source is not None and chr_name in source.references:
                    return source.fetch(chr_name, start - 1, end).upper()
            raise KeyError('sequence not found in the reference or viral reference', chr_name)

        if self.isindel and not self.insertion:
            self.ref = fetch(self.b1.chr_name, self.b1.gr.start, self.b2.gr.start - 1)
            self.alt = self.ref[:1]
        elif self.isindel:
            self.ref = fetch(self.b1.chr_name, self.b1.gr.start, self.b1.gr.start)
            self.alt = self.ref + self.insertion
        else:
            self.ref = fetch(self.b1.chr_name, self.b1.gr.start, self.b1.gr.start)
            self.alt = fetch(self.b2.chr_name, self.b2.gr.start, self.b2.gr.start)

    def add_allelic_fraction(self, t_cov=None, n_cov=None):
        """
        Compute the allelic fraction (tumor and normal) for this breakpoint.

        The denominator is the base-pair coverage at the break ends and the numerator is the max of
        the number of split reads and the number of cigar supporting reads. Split reads may be
        unmapped and so not counted in the coverage. When the coverage is 0 the fraction is set to -1 and
        for the same reason the fraction can (rarely) be greater than 1

        Args:
            t_cov: base-pair coverage of the tumor reads, anything with a coverage_at(chr_name, pos) method
            n_cov: base-pair coverage of the normal reads
        """
        ends = [self.b1] if self.isindel else [self.b1, self.b2]
        if t_cov is not None:
            depths = [t_cov.coverage_at(end.chr_name, end.gr.start) for end in ends]
            self.tcov = max(depths)
            self.tcov_support = max(self.tsplit, self.tcigar)
            self.af_t = _allelic_fraction(self.tcov_support, self.tcov)
            for end, depth in zip(ends, depths):
                end.t_af = _allelic_fraction(max(end.tsplit, self.tcigar), depth)
        if n_cov is not None:
            depths = [n_cov.coverage_at(end.chr_name, end.gr.start) for end in ends]
            self.ncov = max(depths)
            self.ncov_support = max(self.nsplit, self.ncigar)
            self.af_n = _allelic_fraction(self.ncov_support, self.ncov)
            for end, depth in zip(ends, depths):
                end.n_af = _allelic_fraction(max(end.nsplit, self.ncigar), depth)

    def check_blacklist(self, regions):
        """
        flag the breakpoint if it falls in a blacklisted region.
        Only the first break end of indels is checked, other breakpoints are never flagged

        Args:
            regions (RegionCollection): the blacklisted regions
        """
        if not self.isindel:
            return
        if regions.overlaps(self.b1.gr):
            self.blacklist = True

    def check_pon(self, pon):
        """
        Args:
            pon (dict of int by str): number of panel of normals samples by breakpoint hash string
        """
        key = self.hash_string()
        if key in pon:
            self.pon = int(pon[key])

    def check_repeat(self, repeats):
        key = self.hash_string()
        if key in repeats:
            self.repeat_seq = repeats[key]

    def check_dbsnp(self, dbsnp):
        key = self.hash_string()
        if key in dbsnp:
            self.rs = dbsnp[key]

    def find_repeat(self, reference, viral_reference=None):
        """
        look for a tandem repeat in the reference around the first break end and store it as the repeat sequence
        """
        window = DEFAULTS.repeat_window
        for source in [reference, viral_reference]:
            if source is not None and self.b1.chr_name in source.references:
                start = max(1, self.b1.gr.start - window)
                context = source.fetch(self.b1.chr_name, start - 1, self.b1.gr.start + window)
                break
        else:
            raise KeyError('sequence not found in the reference or viral reference', self.b1.chr_name)
        repeat = longest_tandem_repeat(
            context, DEFAULTS.repeat_max_unit, DEFAULTS.repeat_min_length, anchor=self.b1.gr.start - start)
        if repeat:
            self.repeat_seq = repeat

    def score_breakpoint(self):
        """
        Score a breakpoint with a QUAL score, a confidence label, and as somatic or germline

        Raises:
            NotSpecifiedError: there is no evidence to score
        """
        self._set_evidence()
        scorers = {
            EVIDENCE.INDEL: self._score_indel,
            EVIDENCE.DISCORDANT: self._score_dscrd,
            EVIDENCE.ASSEMBLY: self._score_assembly_only,
            EVIDENCE.COMPLEX: self._score_assembly_only,
            EVIDENCE.ASSEMBLY_DISCORDANT: self._score_assembly_dscrd,
        }
        try:
            scorer = scorers[self.evidence]
        except KeyError:
            raise NotSpecifiedError('cannot score a breakpoint without any supporting evidence', self)
        scorer()
        self.somatic_score = self._indel_is_somatic() if self.isindel else self._sv_is_somatic()

    def _score_indel(self):
        support = max(self.tsplit, self.tcigar) + max(self.nsplit, self.ncigar)
        in_repeat = len(self.repeat_seq) >= DEFAULTS.indel_repeat_length
        fractions = [af for af in [self.af_t, self.af_n] if af >= 0]

        if self.blacklist:
            self.confidence = CONFIDENCE.BLACKLIST
        elif 0 <= self.b1.mapq < DEFAULTS.min_indel_mapq:
            self.confidence = CONFIDENCE.LOWMAPQ
        elif support < DEFAULTS.min_indel_support:
            self.confidence = CONFIDENCE.LOWSUPPORT
        elif in_repeat and support < DEFAULTS.indel_repeat_support:
            self.confidence = CONFIDENCE.REPVAR
        elif fractions and max(fractions) < DEFAULTS.min_allelic_fraction:
            self.confidence = CONFIDENCE.LOWAF
        else:
            self.confidence = CONFIDENCE.PASS

        quality = _support_quality(support, self.b1.mapq)
        if in_repeat:
            quality -= len(self.repeat_seq)
        quality -= self.pon * DEFAULTS.pon_quality_penalty
        self.quality = _bounded_quality(quality)

    def _score_dscrd(self):
        disc_mapq = min(self.dc.mapq1, self.dc.mapq2)

        if 0 <= disc_mapq < DEFAULTS.min_disc_mapq:
            self.confidence = CONFIDENCE.LOWMAPQDISC
        elif self.dc.count < DEFAULTS.min_disc_reads or (self.dc.ncount > 0 and self.dc.count < DEFAULTS.min_germline_disc_reads):
            self.confidence = CONFIDENCE.WEAKDISC
        else:
            self.confidence = CONFIDENCE.PASS
        self.quality = _bounded_quality(_support_quality(self.dc.count, disc_mapq))

    def _score_assembly_only(self):
        span = self.get_span()
        num_split = self.tsplit + self.nsplit
        ends = [self.b1, self.b2]
        mapqs = [end.mapq for end in ends if end.mapq >= 0]
        edit_distances = [end.nm for end in ends if end.nm >= 0]
        match_lengths = [end.matchlen for end in ends if end.matchlen >= 0]
        sub_alignments = [end.sub_n for end in ends if end.sub_n >= 0]
        short = 0 <= span <= DEFAULTS.assembly_short_span

        if mapqs and (max(mapqs) <= DEFAULTS.min_assembly_high_mapq or min(mapqs) <= DEFAULTS.min_assembly_any_mapq):
            self.confidence = CONFIDENCE.LOWMAPQ
        elif mapqs and min(mapqs) <= DEFAULTS.min_assembly_mapq and num_split < DEFAULTS.min_assembly_split_reads:
            self.confidence = CONFIDENCE.LOWMAPQ
        elif any([
            edit_distances and max(edit_distances) >= DEFAULTS.max_assembly_nm,
            match_lengths and min(match_lengths) < DEFAULTS.min_assembly_matchlen
        ]):
            self.confidence = CONFIDENCE.LOWMAPQ
        elif sub_alignments and max(sub_alignments) > DEFAULTS.max_sub_alignments:
            self.confidence = CONFIDENCE.MULTIMATCH
        elif short and num_split < DEFAULTS.min_assembly_split_reads_short:
            self.confidence = CONFIDENCE.NODISC
        elif not short and num_split < DEFAULTS.min_assembly_split_reads:
            self.confidence = CONFIDENCE.NODISC
        else:
            self.confidence = CONFIDENCE.PASS

        quality = _support_quality(num_split, min(mapqs) if mapqs else -1)
        self.quality = _bounded_quality(quality / (1 + sum(sub_alignments)))

    def _score_assembly_dscrd(self):
        mapq1 = DEFAULTS.max_mapq if self.b1.local else self.b1.mapq
        mapq2 = DEFAULTS.max_mapq if self.b2.local else self.b2.mapq
        contig_mapq = min(mapq1, mapq2)
        disc_mapq = min(self.dc.mapq1, self.dc.mapq2)
        germline = self.dc.ncount > 0 or self.nsplit > 0
        num_split = self.tsplit + self.nsplit
        total = num_split + self.dc.count

        if any([
            0 <= contig_mapq < DEFAULTS.min_combined_mapq,
            0 <= disc_mapq < DEFAULTS.min_combined_mapq
        ]) and total < DEFAULTS.low_mapq_rescue_support:
            self.confidence = CONFIDENCE.LOWMAPQ
        elif num_split == 0 or total < DEFAULTS.min_combined_support or (germline and total < DEFAULTS.min_germline_combined_support):
            self.confidence = CONFIDENCE.WEAKASSEMBLY
        elif (self.b1.sub_n > 0 and 0 <= self.dc.mapq1 < 1) or (self.b2.sub_n > 0 and 0 <= self.dc.mapq2 < 1):
            self.confidence = CONFIDENCE.MULTIMATCH
        elif germline and self.get_span() == -1 and total < DEFAULTS.min_germline_interchrom_support:
            self.confidence = CONFIDENCE.LOWSUPPORT
        else:
            self.confidence = CONFIDENCE.PASS
        self.quality = _bounded_quality(_support_quality(total, max(contig_mapq, disc_mapq)))

    def _sv_is_somatic(self):
        tumor = max(self.tsplit, 0) + self.dc.tcount
        normal = max(self.nsplit, 0) + self.dc.ncount
        return _somatic_ratio(tumor, normal, self.af_n)

    def _indel_is_somatic(self):
        tumor = max(self.tsplit, self.tcigar)
        normal = max(self.nsplit, self.ncigar)
        score = _somatic_ratio(tumor, normal, self.af_n)
        return score * min(1.0, self.ncov / DEFAULTS.min_normal_coverage)

    def to_file_string(self, noreads=False):
        """
        Args:
            noreads (bool): leave off the trailing read names column

        Returns:
            str: the tab delimited row, columns in the order of :data:`~svbreak.constants.HEADER`
        """
        row = [
            self.b1.chr_name, self.b1.gr.start, self.b1.gr.strand,
            self.b2.chr_name, self.b2.gr.start, self.b2.gr.strand,
            self.ref, self.alt, self.get_span(), self.b1.mapq, self.b2.mapq,
            self.nsplit, self.tsplit, self.b1.sub_n, self.b2.sub_n,
            self.dc.ncount, self.dc.tcount, self.dc.mapq1, self.dc.mapq2,
            self.ncigar, self.tcigar, self.homology, self.insertion, self.cname, self.num_align,
            self.confidence, self.evidence, self.quality, self.secondary, float(self.somatic_score), self.pon,
            self.repeat_seq, self.ncov, self.tcov, float(self.af_n), float(self.af_t), self.blacklist, self.rs
        ]
        if not noreads:
            row.append(self.read_names)
        return '\t'.join([_format_field(value) for value in row])

    def to_print_string(self):
        """
        Returns:
            str: a short description for progress logging
        """
        return '{} {} SPAN {} T/N split {}/{} T/N disc {}/{} {}'.format(
            self.b1.gr.point_string(self.b1.chr_name), self.b2.gr.point_string(self.b2.chr_name), self.get_span(),
            self.tsplit, self.nsplit, self.dc.tcount, self.dc.ncount, self.cname)


def format_breakpoint(bp):
    """
    human readable description of a breakpoint (does not modify the breakpoint)

    Example:
        >>> format_breakpoint(bp)
        '>DEL: 10 1:100(+) T/N split: 4/0 T/N cigar: 3/0 T/N AF 0.5/0 Q 40 PASS'
    """
    if bp.isindel:
        return '>{}: {} {} T/N split: {}/{} T/N cigar: {}/{} T/N AF {}/{} Q {} {}'.format(
            'INS' if bp.insertion else 'DEL', bp.get_span(), bp.b1.gr.point_string(bp.b1.chr_name),
            bp.tsplit, bp.nsplit, bp.tcigar, bp.ncigar, '{:.4g}'.format(bp.af_t), '{:.4g}'.format(bp.af_n),
            bp.quality, bp.confidence)
    return '>{} {} SPAN {} T/N split: {}/{} T/N disc: {}/{} Q {} {} {}'.format(
        bp.b1.gr.point_string(bp.b1.chr_name), bp.b2.gr.point_string(bp.b2.chr_name), bp.get_span(),
        bp.tsplit, bp.nsplit, bp.dc.tcount, bp.dc.ncount, bp.quality, bp.evidence, bp.confidence)
