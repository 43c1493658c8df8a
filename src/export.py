"""Export resolution results to JSON or CSV files."""

import csv
import json
import logging
import sys

from constants import ExitCodes

CSV_HEADERS = ["package", "os", "arch", "outcome", "tag", "location", "path", "reason"]


def infer_format(path, explicit=None):
    """Pick the export format from an explicit choice or the file extension.

    Args:
        path (str): Output file path.
        explicit (str, optional): "json" or "csv" from the command line.

    Returns:
        str: "json" or "csv"; defaults to "json".
    """
    if explicit:
        return explicit.lower()
    if path.lower().endswith(".csv"):
        return "csv"
    return "json"


def export_csv(results, path):
    """Exports the resolution results to a CSV file.

    Args:
        results (list): List of ResolutionResult instances.
        path (str): File path to export the CSV.
    """
    rows = [CSV_HEADERS]

    def _nv(v):
        return "" if v is None else v

    for result in results:
        record = result.to_dict()
        rows.append([_nv(record[h]) for h in CSV_HEADERS])
    try:
        with open(path, 'w', newline='', encoding='utf-8') as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(results, path):
    """Exports the resolution results to a JSON file.

    Args:
        results (list): List of ResolutionResult instances.
        path (str): File path to export the JSON.
    """
    data = [result.to_dict() for result in results]
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
