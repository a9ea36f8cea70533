from datetime import datetime
from glob import glob
import logging
import os

from braceexpand import braceexpand

from .breakpoint import BreakPoint
from .constants import HEADER


class Log:
    """
    wrapper aroung the builtin logging to make it more readable
    """
    def __init__(self, indent_str='  ', indent_level=0, level=logging.INFO):
        self.indent_str = indent_str
        self.indent_level = indent_level
        self.level = level

    def __call__(self, *pos, time_stamp=False, level=None, indent_level=0, **kwargs):
        if level is None and self.level is None:
            return
        elif level is None:
            level = self.level

        stamp = datetime.now().strftime('[%Y-%m-%d %H:%M:%S]') if time_stamp else ' ' * 21
        indent_prefix = self.indent_str * (self.indent_level + indent_level)
        message = '{} {}{}'.format(stamp, indent_prefix, ' '.join([str(p) for p in pos]))
        logging.log(level, message, **kwargs)

    def indent(self):
        return Log(self.indent_str, self.indent_level + 1, self.level)

    def __enter__(self):
        return self

    def __exit__(self, *pos):
        pass


LOG = Log()


def bash_expands(*expressions):
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{tests,svbreak}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (SvNamespace): the namespace to print arguments for
    """
    LOG('arguments', time_stamp=True)
    with LOG.indent() as log:
        for arg, val in sorted(args.items()):
            if isinstance(val, list):
                if len(val) <= 1:
                    log(arg, '= {}'.format(val))
                    continue
                log(arg, '= [')
                for v in val:
                    log(repr(v), indent_level=1)
                log(']')
            elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
                log(arg, '=', repr(val))
            else:
                log(arg, '=', object.__repr__(val))


def sort_breakpoints(bps):
    return sorted(bps)


def dedup_breakpoints(bps):
    """
    sort the breakpoints and keep only the first (best supported) of each group with the same break ends

    Args:
        bps (:class:`list` of :class:`~svbreak.breakpoint.BreakPoint`): the breakpoints

    Returns:
        :class:`list` of :class:`~svbreak.breakpoint.BreakPoint`: the sorted unique breakpoints

    Note:
        the break ends of each input breakpoint are put in order first (see :meth:`~svbreak.breakpoint.BreakPoint.order`)
    """
    for bp in bps:
        bp.order()
    result = []
    for bp in sort_breakpoints(bps):
        if result and result[-1].same_break(bp):
            continue
        result.append(bp)
    return result


def remove_exact_duplicates(bps):
    """
    removes breakpoints equal to one seen earlier in the list, keeping the input order
    """
    result = []
    seen = set()
    for bp in bps:
        if bp in seen:
            continue
        seen.add(bp)
        result.append(bp)
    return result


def write_breakpoints(filename, bps, noreads=False):
    """
    write the breakpoints to a tab delimited file with a header row

    Args:
        filename (str): the output path
        bps (:class:`list` of :class:`~svbreak.breakpoint.BreakPoint`): the breakpoints in the order to write them
        noreads (bool): leave off the read names column
    """
    header = HEADER[:-1] if noreads else HEADER
    with open(filename, 'w') as fh:
        LOG('writing:', filename)
        fh.write('\t'.join(header) + '\n')
        for bp in bps:
            fh.write(bp.to_file_string(noreads=noreads) + '\n')


def read_breakpoints(filename, references):
    """
    read breakpoints from a file written by :func:`write_breakpoints`. The header row, blank lines and lines starting
    with '#' are skipped

    Args:
        filename (str): the input path
        references (list of str): reference names by reference id

    Raises:
        ParseError: a row could not be read
    """
    bps = []
    header_prefix = '\t'.join(HEADER[:2]) + '\t'
    with open(filename, 'r') as fh:
        for line in fh:
            if not line.strip() or line.startswith('#') or line.startswith(header_prefix):
                continue
            bps.append(BreakPoint.from_file_string(line, references))
    LOG('loaded', len(bps), 'breakpoints from', filename)
    return bps
