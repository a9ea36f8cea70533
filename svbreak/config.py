import argparse

from . import __version__
from .constants import WeakNamespace, cast_boolean, float_fraction

DEFAULTS = WeakNamespace()
"""
thresholds used in collecting evidence for and scoring breakpoints. Every value may be overridden by the
SVBREAK_<NAME> environment variable or the equivalent command line option
"""
DEFAULTS.add(
    'split_buffer', 5,
    defn='the number of bases a read must extend past each side of the breakpoint on the contig to count as a split read')
DEFAULTS.add(
    'discordant_cluster_padding', 400,
    defn='distance (bp) around each break end within which a discordant cluster region must fall to be merged')
DEFAULTS.add(
    'max_mapq', 60,
    defn='the maximum mapping quality reported by the aligner. Mapping qualities are scaled against this in scoring')
DEFAULTS.add(
    'max_quality', 99,
    defn='the upper bound on the quality score of a breakpoint')
DEFAULTS.add(
    'quality_per_read', 5.0,
    defn='the quality contributed by each supporting read at full mapping quality')
DEFAULTS.add(
    'min_indel_mapq', 10,
    defn='indels from contig alignments with a lower mapping quality are marked LOWMAPQ')
DEFAULTS.add(
    'min_indel_support', 3,
    defn='the minimum number of split or cigar supporting reads (tumor + normal) for an indel to pass')
DEFAULTS.add(
    'indel_repeat_length', 10,
    defn='indels in a repeat at least this long require indel_repeat_support reads to pass')
DEFAULTS.add(
    'indel_repeat_support', 7,
    defn='the minimum number of supporting reads for an indel falling in a repeat')
DEFAULTS.add(
    'min_allelic_fraction', 0.05, cast_type=float_fraction,
    defn='indels with a (computed) allelic fraction below this are marked LOWAF')
DEFAULTS.add(
    'pon_quality_penalty', 10,
    defn='quality subtracted from an indel for each panel-of-normals sample carrying it')
DEFAULTS.add(
    'min_disc_mapq', 20,
    defn='discordant-only breakpoints with a lower mean mapping quality on either side are marked LOWMAPQDISC')
DEFAULTS.add(
    'min_disc_reads', 8,
    defn='the minimum number of discordant read pairs for a discordant-only breakpoint to pass')
DEFAULTS.add(
    'min_germline_disc_reads', 15,
    defn='the minimum number of discordant read pairs for a discordant-only breakpoint seen in the normal to pass')
DEFAULTS.add(
    'min_assembly_mapq', 30,
    defn='assembly-only breakpoints with an end below this mapping quality require min_assembly_split_reads')
DEFAULTS.add(
    'min_assembly_high_mapq', 50,
    defn='at least one end of an assembly-only breakpoint must have a mapping quality above this')
DEFAULTS.add(
    'min_assembly_any_mapq', 10,
    defn='both ends of an assembly-only breakpoint must have a mapping quality above this')
DEFAULTS.add(
    'max_assembly_nm', 10,
    defn='assembly-only breakpoints where an end has this edit distance or more are marked LOWMAPQ')
DEFAULTS.add(
    'min_assembly_matchlen', 50,
    defn='assembly-only breakpoints where an end aligns fewer bases than this are marked LOWMAPQ')
DEFAULTS.add(
    'max_sub_alignments', 2,
    defn='break ends with more competing alignments than this are marked MULTIMATCH')
DEFAULTS.add(
    'assembly_short_span', 1500,
    defn='intrachromosomal events up to this span are considered short for assembly-only scoring')
DEFAULTS.add(
    'min_assembly_split_reads_short', 4,
    defn='the minimum number of split reads for a short assembly-only breakpoint to pass')
DEFAULTS.add(
    'min_assembly_split_reads', 7,
    defn='the minimum number of split reads for a long or interchromosomal assembly-only breakpoint to pass')
DEFAULTS.add(
    'min_combined_mapq', 10,
    defn='assembly + discordant breakpoints with a lower contig or discordant mapping quality require '
         'low_mapq_rescue_support reads')
DEFAULTS.add(
    'low_mapq_rescue_support', 15,
    defn='the total number of reads which rescues a low mapping quality assembly + discordant breakpoint')
DEFAULTS.add(
    'min_combined_support', 4,
    defn='the minimum split + discordant reads for an assembly + discordant breakpoint to pass')
DEFAULTS.add(
    'min_germline_combined_support', 7,
    defn='the minimum split + discordant reads for an assembly + discordant breakpoint seen in the normal to pass')
DEFAULTS.add(
    'min_germline_interchrom_support', 15,
    defn='the minimum split + discordant reads for an interchromosomal germline breakpoint to pass')
DEFAULTS.add(
    'somatic_normal_weight', 10.0,
    defn='the weight given to each normal supporting read relative to a tumor read in the somatic score')
DEFAULTS.add(
    'min_normal_coverage', 8,
    defn='indels with less normal coverage than this have their somatic score scaled down proportionally')
DEFAULTS.add(
    'min_somatic_score', 0.5, cast_type=float_fraction,
    defn='breakpoints with at least this somatic score are considered somatic')
DEFAULTS.add(
    'repeat_window', 20,
    defn='the number of reference bases on each side of the break end searched for tandem repeats')
DEFAULTS.add(
    'repeat_max_unit', 6,
    defn='the longest repeat unit searched for')
DEFAULTS.add(
    'repeat_min_length', 8,
    defn='the minimum length of a tandem repeat to be reported')


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type in [float_fraction, float]:
        return 'FLOAT'
    elif arg_type == int:
        return 'INT'
    return None


def augment_parser(arguments, parser, defaults=DEFAULTS):
    """
    adds an option to the parser for each of the given names in the defaults namespace

    Args:
        arguments (list of str): the names of the defaults to add
        parser (argparse.ArgumentParser): the parser (or argument group) to add to
        defaults (SvNamespace): the namespace holding the default values, types and definitions
    """
    for arg in arguments:
        if arg == 'help':
            parser.add_argument('-h', '--help', action='help', help='show this help message and exit')
        elif arg == 'version':
            parser.add_argument(
                '-v', '--version', action='version', version='%(prog)s version ' + __version__,
                help='Outputs the version number')
        elif arg == 'log':
            parser.add_argument('--log', help='redirect stdout to a log file', default=None)
        elif arg == 'log_level':
            parser.add_argument(
                '--log_level', help='level of logging to output', choices=['INFO', 'DEBUG'], default='INFO')
        else:
            parser.add_argument(
                '--{}'.format(arg), default=defaults[arg], type=defaults.type(arg),
                help=defaults.define(arg, ''), metavar=get_metavar(defaults.type(arg)))


def apply_defaults(args, defaults=DEFAULTS):
    """
    copies any parsed options with a matching default name onto the defaults namespace so that the scoring
    functions pick them up

    Returns:
        dict: the replaced values by name, to be passed to :func:`restore_defaults`
    """
    previous = {}
    for arg in defaults.keys():
        if arg in args:
            previous[arg] = defaults.raw(arg)
            defaults[arg] = args[arg]
    return previous


def restore_defaults(previous, defaults=DEFAULTS):
    for arg, value in previous.items():
        defaults[arg] = value
