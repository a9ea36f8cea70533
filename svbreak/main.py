#!python
import argparse
import logging
import platform
import sys
import time

from . import __version__
from . import config as _config
from .constants import EXIT_OK, SUBCOMMAND, SvNamespace
from .coverage import BamCoverage
from .file_io import load_blacklist, load_lookup, load_pon, load_reference_genome
from .score import score_breakpoints
from . import util as _util


def load_references(reference_genome, viral_reference=None):
    """
    Returns:
        tuple: the reference, the viral reference (or None) and the combined list of reference names. Viral sequences
        are numbered after those of the reference genome
    """
    reference = load_reference_genome(reference_genome)
    viral = load_reference_genome(viral_reference) if viral_reference else None
    references = list(reference.references) + (list(viral.references) if viral is not None else [])
    return reference, viral, references


def read_inputs(inputs, references):
    bps = []
    for filename in inputs:
        _util.LOG('loading:', filename)
        bps.extend(_util.read_breakpoints(filename, references))
    result = _util.remove_exact_duplicates(bps)
    _util.LOG('loaded', len(result), 'breakpoints', '(removed {} exact duplicates)'.format(len(bps) - len(result)))
    return result


def score_main(
    inputs, output, reference_genome, viral_reference=None, tumor_bam=None, normal_bam=None,
    blacklist=None, pon=None, dbsnp=None, tumor_cigars=None, normal_cigars=None,
    min_coverage_mapq=0, threads=1, noreads=False, **kwargs
):
    """
    read breakpoints, collect the remaining evidence, score, sort and deduplicate them and write the result

    Args:
        inputs (list of str): the breakpoint files
        output (str): path to the output breakpoint file
        reference_genome (str): path to the reference fasta
        viral_reference (str): path to the fasta of sequences not in the reference genome
        tumor_bam (str): indexed tumor bam used for coverage
        normal_bam (str): indexed normal bam used for coverage
        blacklist (str): bed file of regions where indels are flagged
        pon (str): panel of normals counts by breakpoint hash string
        dbsnp (str): dbSNP ids by breakpoint hash string
        tumor_cigars (str): tumor reads containing each indel by breakpoint hash string
        normal_cigars (str): normal reads containing each indel by breakpoint hash string
        min_coverage_mapq (int): reads below this mapping quality are not counted in the coverage
        threads (int): the number of threads to score with
        noreads (bool): leave off the read names column
    """
    reference, viral, references = load_references(reference_genome, viral_reference)
    bps = read_inputs(inputs, references)

    annotations = {'reference': reference, 'viral_reference': viral}
    coverages = []
    for name, bam in [('tumor_coverage', tumor_bam), ('normal_coverage', normal_bam)]:
        if bam:
            _util.LOG('loading:', bam)
            annotations[name] = BamCoverage(bam, min_mapping_quality=min_coverage_mapq)
            coverages.append(annotations[name])
    if blacklist:
        annotations['blacklist'] = load_blacklist(blacklist, references)
    if pon:
        annotations['pon'] = load_pon(pon)
    if dbsnp:
        annotations['dbsnp'] = load_lookup(dbsnp)
    if tumor_cigars:
        annotations['tumor_cigars'] = load_lookup(tumor_cigars, int)
    if normal_cigars:
        annotations['normal_cigars'] = load_lookup(normal_cigars, int)

    try:
        results = score_breakpoints(bps, workers=threads, **annotations)
    finally:
        for coverage in coverages:
            coverage.close()
    _util.write_breakpoints(output, results, noreads=noreads)
    _util.LOG('wrote', len(results), 'breakpoints ({} somatic)'.format(len([bp for bp in results if bp.is_somatic])))
    return EXIT_OK


def merge_main(inputs, output, reference_genome, viral_reference=None, noreads=False, **kwargs):
    """
    merge already scored breakpoint files from several detection passes, keeping the best supported breakpoint
    at each junction
    """
    _, _, references = load_references(reference_genome, viral_reference)
    bps = read_inputs(inputs, references)
    results = _util.dedup_breakpoints(bps)
    _util.LOG('removed', len(bps) - len(results), 'duplicate breakpoints')
    _util.write_breakpoints(output, results, noreads=noreads)
    return EXIT_OK


def main(argv=None):
    """
    sets up the parser and checks the validity of command line args
    loads reference files and redirects into subcommand main functions

    Args:
        argv (list): List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())

    parser = argparse.ArgumentParser(formatter_class=_config.CustomHelpFormatter)
    _config.augment_parser(['version'], parser)
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(command, formatter_class=_config.CustomHelpFormatter, add_help=False)
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        _config.augment_parser(['help', 'version', 'log', 'log_level'], optional[command])
        required[command].add_argument(
            '-n', '--inputs', nargs='+', required=True, metavar='FILEPATH', help='path to the input breakpoint files')
        required[command].add_argument('-o', '--output', required=True, metavar='FILEPATH', help='path to the output file')
        required[command].add_argument(
            '--reference_genome', required=True, metavar='FILEPATH', help='path to the (indexed) reference genome fasta')
        optional[command].add_argument(
            '--viral_reference', metavar='FILEPATH',
            help='fasta of sequences (viruses, decoys) not in the reference genome')
        optional[command].add_argument(
            '--noreads', action='store_true', default=False, help='do not write the supporting read names column')

    # score arguments
    optional[SUBCOMMAND.SCORE].add_argument('--tumor_bam', metavar='FILEPATH', help='indexed tumor bam used for coverage')
    optional[SUBCOMMAND.SCORE].add_argument('--normal_bam', metavar='FILEPATH', help='indexed normal bam used for coverage')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--min_coverage_mapq', type=int, default=0, metavar=_config.get_metavar(int),
        help='reads below this mapping quality are not counted in the coverage')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--blacklist', metavar='FILEPATH', help='bed file of regions where indels are flagged BLACKLIST')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--pon', metavar='FILEPATH', help='tab delimited breakpoint hash string and number of panel of normals samples')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--dbsnp', metavar='FILEPATH', help='tab delimited breakpoint hash string and dbSNP id')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--tumor_cigars', metavar='FILEPATH',
        help='tab delimited indel hash string and number of tumor reads whose alignment contains the indel')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--normal_cigars', metavar='FILEPATH',
        help='tab delimited indel hash string and number of normal reads whose alignment contains the indel')
    optional[SUBCOMMAND.SCORE].add_argument(
        '--threads', type=int, default=1, metavar=_config.get_metavar(int), help='number of threads to score with')
    _config.augment_parser(_config.DEFAULTS.keys(), optional[SUBCOMMAND.SCORE])

    args = SvNamespace(**parser.parse_args(argv).__dict__)

    log_conf = {'format': '{message}', 'style': '{', 'level': args.log_level}

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.LOG('svbreak: {}'.format(__version__))
    _util.LOG('hostname:', platform.node(), time_stamp=False)
    _util.log_arguments(args)

    try:
        args.inputs = _util.bash_expands(*args.inputs)
    except FileNotFoundError:
        parser.error('--inputs file(s) for {} {} do not exist'.format(args.command, args.inputs))

    command = args.command
    log_to_file = args.log
    kwargs = {
        key: value for key, value in args.items()
        if key not in _config.DEFAULTS.keys() and key not in {'command', 'log', 'log_level'}
    }

    previous_defaults = _config.apply_defaults(args)
    try:
        if command == SUBCOMMAND.SCORE:
            ret_val = score_main(**kwargs)
        else:
            ret_val = merge_main(**kwargs)

        duration = int(time.time()) - start_time
        _util.LOG('run time (s): {}'.format(duration), time_stamp=False)
        return ret_val
    except Exception as err:
        if log_to_file:
            logging.exception(err)  # capture the error in the logging output file
        raise err
    finally:
        _config.restore_defaults(previous_defaults)
        for handler in logging.root.handlers:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


if __name__ == '__main__':
    main()
