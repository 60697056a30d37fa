# -*- coding: utf-8 -*-
"""Product codes mentioned in Facebook live comments.

Customers order by commenting a product code. Only codes written inside
square brackets are taken, since bare "N55" also appears in ordinary text
(phone numbers, sizes):

    "chốt [N217] size M, thêm [n55L] nha" → ["N217", "N55L"]
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

BRACKETED_CODE_PATTERN = re.compile(r"\[(N\d+[A-Z]*)\]", re.IGNORECASE)


def extract_product_codes(text: str) -> List[str]:
    """Extract bracketed product codes from a comment.

    Returns:
        Upper-cased codes, de-duplicated, in order of first appearance.
    """
    if not text or not isinstance(text, str):
        return []

    codes = []
    for match in BRACKETED_CODE_PATTERN.finditer(text):
        code = match.group(1).strip().upper()
        if code not in codes:
            codes.append(code)

    if codes:
        logger.debug(f"Extracted product codes {codes} from comment")
    return codes
