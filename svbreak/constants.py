"""
module responsible for small utility functions and constants used throughout the svbreak package
"""
import os
import re

from Bio.Seq import reverse_complement as _reverse_complement


EXIT_OK = 0


def cast_boolean(input_value):
    """
    Example:
        >>> cast_boolean('True')
        True
        >>> cast_boolean('0')
        False
    """
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


class SvNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> nspace = SvNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """

    def __init__(self, *pos, **kwargs):
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_env_overwritable', set())
        object.__setattr__(self, '_env_prefix', 'SVBREAK')

        for k in pos:
            if k in self._members:
                raise AttributeError('Cannot respecify existing attribute', k, self._members[k])
            self[k] = k

        for attr, val in kwargs.items():
            if attr in self._members:
                raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
            self[attr] = val

        for attr, value in self._members.items():
            self._set_type(attr, type(value))

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()])))

    def get_env_name(self, attr):
        """
        Get the name of the corresponding environment variable

        Example:
            >>> nspace = SvNamespace(a=1)
            >>> nspace.get_env_name('a')
            'SVBREAK_A'
        """
        if self._env_prefix:
            return '{}_{}'.format(self._env_prefix, attr).upper()
        return attr.upper()

    def get_env_var(self, attr):
        """
        retrieve the environment variable definition of a given attribute
        """
        env_name = self.get_env_name(attr)
        env = os.environ[env_name].strip()
        attr_type = self._types.get(attr, str)
        return attr_type(env)

    def is_env_overwritable(self, attr):
        """
        Returns:
            bool: True if the variable is overrided by specifying the environment variable equivalent
        """
        return attr in self._env_overwritable

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            if self.is_env_overwritable(attr):
                try:
                    return self.get_env_var(attr)
                except KeyError:
                    pass
            return variables[attr]

    def items(self):
        """
        Example:
            >>> SvNamespace(thing=1, otherthing=2).items()
            [('thing', 1), ('otherthing', 2)]
        """
        return [(k, self[k]) for k in self.keys()]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, val):
        self.__setattr__(key, val)

    def __setattr__(self, attr, val):
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        object.__getattribute__(self, '_members')[attr] = val

    def raw(self, attr):
        """
        the stored value of an attribute, ignoring any environment override
        """
        return self._members[attr]

    def get(self, key, *pos):
        """
        get an attribute, return a default (if given) if the attribute does not exist
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. get takes a single \'default\' value argument')
        try:
            return self[key]
        except AttributeError as err:
            if pos:
                return pos[0]
            raise err

    def keys(self):
        return [k for k in self._members]

    def values(self):
        return [self[k] for k in self._members]

    def enforce(self, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> STRAND.enforce('+')
            '+'
            >>> STRAND.enforce('x')
            Traceback (most recent call last):
            ....
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value

    def reverse(self, value):
        """
        for a given value, return the associated key

        Raises:
            KeyError: the value is not unique
            KeyError: the value is not assigned
        """
        result = []
        for key in self.keys():
            if self[key] == value:
                result.append(key)
        if len(result) > 1:
            raise KeyError('could not reverse, the mapping is not unique', value, result)
        elif not result:
            raise KeyError('input value is not assigned to a key', value)
        return result[0]

    def __iter__(self):
        return iter(self.keys())

    def _set_type(self, attr, cast_type):
        if cast_type == bool:
            self._types[attr] = cast_boolean
        else:
            self._types[attr] = cast_type

    def type(self, attr, *pos):
        if len(pos) > 1:
            raise TypeError('too many arguments. type takes a single \'default\' value argument')
        try:
            return self._types[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def define(self, attr, *pos):
        """
        Get the definition of a given attribute or return a default (when given) if the attribute does not exist

        Raises:
            KeyError: the attribute does not exist and a default was not given
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. define takes a single \'default\' value argument')
        try:
            return self._defns[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def add(self, attr, value, defn=None, cast_type=None, env_overwritable=False):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition, will be used in generating the help menus
            cast_type (callable): the function to use in casting the value
            env_overwritable (bool): True if this attribute will be overriden by its environment variable equivalent

        Example:
            >>> nspace = SvNamespace()
            >>> nspace.add('thing', 1, defn='I am a thing')
        """
        if cast_type:
            self._set_type(attr, cast_type)
        else:
            self._set_type(attr, type(value))
        if defn:
            self._defns[attr] = defn
        if env_overwritable:
            self._env_overwritable.add(attr)
        self[attr] = value

    def __call__(self, value):
        try:
            return self.enforce(value)
        except KeyError:
            raise TypeError('Invalid value {} for {}. Must be a valid member: {}'.format(
                repr(value), self.__class__.__name__, self.values()))


class WeakNamespace(SvNamespace):
    """
    namespace where every member can be overridden by its SVBREAK_ environment variable
    """

    def is_env_overwritable(self, attr):
        return True


def float_fraction(num):
    """
    cast input to a float

    Raises:
        TypeError: if the input cannot be cast to a float or the number is not between 0 and 1
    """
    try:
        num = float(num)
    except ValueError:
        raise TypeError('Must be a value between 0 and 1')
    if num < 0 or num > 1:
        raise TypeError('Must be a value between 0 and 1')
    return num


SUBCOMMAND = SvNamespace(SCORE='score', MERGE='merge')
""":class:`SvNamespace`: holds controlled vocabulary for allowed pipeline stage values

- ``SCORE``: annotate, score and deduplicate breakpoint rows
- ``MERGE``: merge and deduplicate already scored rows from several detection passes
"""


def reverse_complement(s):
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s (str): the input DNA sequence

    Returns:
        :class:`str`: the reverse complement of the input sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    return str(_reverse_complement(input_string))


STRAND = SvNamespace(POS='+', NEG='-')
""":class:`SvNamespace`: holds controlled vocabulary for allowed strand values

- ``POS``: sequence to the left of the break is retained (the break is at the end of the aligned block)
- ``NEG``: sequence to the right of the break is retained (the break is at the start of the aligned block)
"""

CIGAR = SvNamespace(M=0, I=1, D=2, N=3, S=4, H=5, P=6, X=8, EQ=7)  # noqa
""":class:`SvNamespace`: Enum-like. For readable cigar values

- ``M``: alignment match (can be a sequence match or mismatch)
- ``I``: insertion to the reference
- ``D``: deletion from the reference
- ``N``: skipped region from the reference
- ``S``: soft clipping (clipped sequences present in SEQ)
- ``H``: hard clipping (clipped sequences NOT present in SEQ)
- ``P``: padding (silent deletion from padded reference)
- ``EQ``: sequence match (=)
- ``X``: sequence mismatch

note: descriptions are taken from the `samfile documentation <https://samtools.github.io/hts-specs/SAMv1.pdf>`_
"""

SAMPLE = SvNamespace(TUMOR='t', NORMAL='n')
""":class:`SvNamespace`: prefix of the SR read tag identifying which sample a read came from"""

READ_TAG = SvNamespace(
    ALIGNMENT='AL',
    CONTIG='CN',
    SAMPLE_READ='SR',
    EDIT_DISTANCE='NM',
    ALT_HITS='XA'
)
""":class:`SvNamespace`: read tags consumed by the breakpoint model

- ``ALIGNMENT``: comma separated 0-based start positions of a read on each assembled contig it was aligned to
- ``CONTIG``: comma separated contig names, in the same order as ``ALIGNMENT``
- ``SAMPLE_READ``: read identifier prefixed by the sample it was read from (t or n)
- ``EDIT_DISTANCE``: edit distance of the alignment to the reference
- ``ALT_HITS``: alternative hits reported by bwa, semi-colon delimited
"""

EVIDENCE = SvNamespace(
    INDEL='INDEL',
    ASSEMBLY='ASSMB',
    DISCORDANT='DSCRD',
    ASSEMBLY_DISCORDANT='ASDIS',
    COMPLEX='COMPL'
)
""":class:`SvNamespace`: controlled vocabulary for the types of evidence supporting a breakpoint

- ``INDEL``: a single contig alignment containing an insertion or deletion
- ``ASSEMBLY``: a contig split into two alignments, no discordant read pairs
- ``DISCORDANT``: discordant read pairs only
- ``ASSEMBLY_DISCORDANT``: a split contig corroborated by discordant read pairs
- ``COMPLEX``: a contig split into more than two alignments, no discordant read pairs
"""

CONFIDENCE = SvNamespace(
    PASS='PASS',
    LOWMAPQ='LOWMAPQ',
    LOWMAPQDISC='LOWMAPQDISC',
    WEAKDISC='WEAKDISC',
    WEAKASSEMBLY='WEAKASSEMBLY',
    MULTIMATCH='MULTIMATCH',
    NODISC='NODISC',
    LOWSUPPORT='LOWSUPPORT',
    LOWAF='LOWAF',
    REPVAR='REPVAR',
    BLACKLIST='BLACKLIST'
)
""":class:`SvNamespace`: the confidence labels assigned by scoring

- ``PASS``: passed all filters
- ``LOWMAPQ``: the contig alignments are of low mapping quality
- ``LOWMAPQDISC``: the discordant reads are of low mapping quality
- ``WEAKDISC``: too few discordant read pairs
- ``WEAKASSEMBLY``: too little split read support for an assembled breakpoint
- ``MULTIMATCH``: a break end aligns equally well elsewhere
- ``NODISC``: an assembly-only breakpoint without enough split reads to compensate for the lack of read pairs
- ``LOWSUPPORT``: germline interchromosomal events with low total support
- ``LOWAF``: allelic fraction below the minimum
- ``REPVAR``: an indel in a repeat without enough support
- ``BLACKLIST``: falls in a blacklisted region
"""

EMPTY_FIELD = 'x'
""":class:`str`: placeholder written in place of empty strings in the output file"""

HEADER = (
    'chr1', 'pos1', 'strand1', 'chr2', 'pos2', 'strand2', 'ref', 'alt', 'span',
    'mapq1', 'mapq2', 'nsplit', 'tsplit', 'subn1', 'subn2', 'ndisc', 'tdisc', 'disc_mapq1', 'disc_mapq2',
    'ncigar', 'tcigar', 'homology', 'insertion', 'contig', 'numalign', 'confidence', 'evidence', 'quality',
    'secondary_alignment', 'somatic_score', 'pon_samples', 'repeat_seq', 'normal_cov', 'tumor_cov',
    'normal_allelic_fraction', 'tumor_allelic_fraction', 'graylist', 'DBSNP', 'reads'
)
""":class:`tuple` of :class:`str`: the fixed column order of the breakpoint file. The last column (reads) is optional"""

HEADER_LINE = '\t'.join(HEADER)
""":class:`str`: the header row of the breakpoint file"""
