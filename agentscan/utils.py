import json
import sys
from collections import Counter

from tabulate import tabulate

from agentscan.agent import DEVICE_TYPES


def report_error(msg, json_output):
    if json_output:
        print(json.dumps({'Error': msg}))
    else:
        print("ERROR: {}. See agentscan.log file for more details.".format(msg))


def to_json(results):
    return json.dumps({'Report': results}, indent=4)


def pretty_print(results, file_output=None):
    if file_output:
        print("\n\nFinished classifying {} user agents. Report is available in {}\n".
              format(len(results), file_output))
        with open(file_output, 'w') as fd:
            write_report(results, fd)
    else:
        write_report(results, sys.stdout)


def write_report(results, fd):
    fd.write("\n")
    print_title("SUMMARY", fd)
    fd.write("{} user agents were classified.\n\n".format(len(results)))

    counts = Counter(each['device_type'] for each in results)
    fd.write("{}\n".format(
        tabulate([[t, counts.get(t, 0)] for t in DEVICE_TYPES],
                 headers=['Device type', 'Count'])))

    print_title("DETAILS", fd)
    for i, result in enumerate(results):
        print_result(i, result, fd)


def print_result(number, result, fd):
    print_subtitle("User agent {}".format(number + 1), fd)
    aux = []
    for k, v in result.items():
        if isinstance(v, list):
            v = ', '.join(v)
        aux.append([k, '' if v is None else v])
    fd.write("{}\n\n".format(tabulate(aux)))


def print_title(string, fd):
    """Prints like

        *****
        Title
        *****
    """
    aux = '*' * len(string)
    fd.write("\n{}\n".format(aux))
    fd.write("{}\n".format(string))
    fd.write("{}\n\n".format(aux))


def print_subtitle(string, fd):
    """Prints like

        Subtitle
        =======
    """
    aux = '=' * len(string)
    fd.write("{}\n".format(string))
    fd.write("{}\n\n".format(aux))
