from shortuuid import uuid

from .interval import GenomicRegion


class DiscordantCluster:
    """
    summary of a cluster of discordant read pairs. The clustering itself happens upstream, this only holds the
    per-sample counts and mapping quality aggregates the breakpoint model needs
    """

    def __init__(self, reg1=None, reg2=None, tcount=0, ncount=0, mapq1=-1, mapq2=-1, read_names=None, id=None):
        """
        Args:
            reg1 (GenomicRegion): the region covered by the first reads of the pairs
            reg2 (GenomicRegion): the region covered by the mates
            tcount (int): the number of tumor read pairs
            ncount (int): the number of normal read pairs
            mapq1 (float): mean mapping quality of the reads in the first region
            mapq2 (float): mean mapping quality of the reads in the second region
            read_names (list of str): names of the supporting read pairs
            id (str): unique identifier for the cluster
        """
        self.reg1 = reg1 if reg1 is not None else GenomicRegion(0, 0)
        self.reg2 = reg2 if reg2 is not None else GenomicRegion(0, 0)
        self.tcount = int(tcount)
        self.ncount = int(ncount)
        self.mapq1 = float(mapq1)
        self.mapq2 = float(mapq2)
        self.read_names = list(read_names or [])
        self.id = id if id is not None else uuid()

    def __repr__(self):
        return 'DiscordantCluster({}, {}, tcount={}, ncount={})'.format(self.reg1, self.reg2, self.tcount, self.ncount)

    @property
    def count(self):
        return self.tcount + self.ncount

    def is_empty(self):
        return self.count == 0

    def copy(self):
        return DiscordantCluster(
            GenomicRegion(*self.reg1.key), GenomicRegion(*self.reg2.key),
            tcount=self.tcount, ncount=self.ncount, mapq1=self.mapq1, mapq2=self.mapq2,
            read_names=self.read_names, id=self.id
        )

    def to_region_string(self, references=None):
        """
        Example:
            >>> DiscordantCluster(GenomicRegion(0, 100, 200), GenomicRegion(1, 500, 600, '-')).to_region_string(['1', '2'])
            '1:100-200(+)__2:500-600(-)'
        """
        def region_string(reg):
            chr_name = reg.chr if references is None else references[reg.chr]
            return '{}:{}-{}({})'.format(chr_name, reg.start, reg.end, reg.strand)
        return '{}__{}'.format(region_string(self.reg1), region_string(self.reg2))
