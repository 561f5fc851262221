"""HTML parsers for the business registry pages.

Pure functions: HTML in, domain records out. Missing labels, tables or rows
degrade to empty values; the only structural requirement is the one the
registry itself imposes (a numeric handle / application id in an inline
`onclick`).
"""

from __future__ import annotations

import logging
import re

from bs4 import Tag

from companyinfo.adapters.markup import (
    attr_of,
    cells,
    extract_field,
    extract_rows,
    find_table_by_caption,
    first_match,
    parse_html,
    table_rows,
    text_of,
    value_cell,
)
from companyinfo.core.domain.locators import (
    ApplicationPageLocators,
    EntityPageLocators,
    SearchPageLocators,
)
from companyinfo.core.domain.models import (
    ApplicationDetail,
    ApplicationMetadata,
    ApplicationStub,
    EntityMetadata,
    Payment,
    PreparedDocument,
    ScannedDocument,
    StatusHistoryEntry,
)

logger = logging.getLogger(__name__)


# --- Search results ----------------------------------------------------------


def parse_search_handle(html: str, company_id: str, locators: SearchPageLocators) -> str | None:
    """Internal numeric handle of `company_id`, or None when no row carries one."""

    soup = parse_html(html)
    pattern = re.compile(locators.handle_pattern)
    seen_rows: set[int] = set()

    for td in soup.find_all("td"):
        if company_id not in td.get_text():
            continue
        # Layout cells wrapping the results table also contain the id.
        if any(company_id in inner.get_text() for inner in td.find_all("td")):
            continue
        row = td.find_parent("tr")
        if row is None or id(row) in seen_rows:
            continue
        seen_rows.add(id(row))
        for anchor in row.find_all("a", onclick=True):
            onclick = attr_of(anchor, "onclick")
            if not onclick or not onclick.startswith(locators.handle_anchor_prefix):
                continue
            handle = first_match(pattern, onclick)
            if handle:
                return handle
            logger.warning("registry: unparseable handle in onclick %r for %s", onclick, company_id)
    return None


# --- Entity page -------------------------------------------------------------


def parse_entity_metadata(html: str, locators: EntityPageLocators) -> EntityMetadata:
    soup = parse_html(html)

    status_cell = value_cell(soup, locators.status_label)
    status_div = status_cell.find("div") if status_cell is not None else None

    documents: dict[str, str] = {}
    docs_cell = value_cell(soup, locators.documents_label)
    if docs_cell is not None:
        for anchor in docs_cell.find_all("a"):
            link_text = text_of(anchor)
            href = attr_of(anchor, "href")
            if not link_text or not href:
                continue
            for key, needle in locators.document_links.items():
                if needle in link_text:
                    documents[key] = href

    reporting = soup.find(
        "a",
        href=lambda value: bool(value) and locators.reporting_link_substring in value,
    )

    return EntityMetadata(
        identification_code=extract_field(soup, locators.identification_code_label),
        name=extract_field(soup, locators.name_label),
        legal_form=extract_field(soup, locators.legal_form_label),
        registration_date=extract_field(soup, locators.registration_date_label),
        status_text=text_of(status_div),
        reporting_link=attr_of(reporting, "href") or "",
        documents=documents,
    )


def parse_application_stubs(html: str, locators: EntityPageLocators) -> list[ApplicationStub]:
    """Application rows of the entity page, in page order.

    A row qualifies only with exactly `application_cell_count` cells and a
    numeric id in the first cell's `onclick`; anything else is skipped.
    """

    soup = parse_html(html)
    pattern = re.compile(locators.application_id_pattern)
    stubs: list[ApplicationStub] = []

    for table in soup.select(locators.applications_table_selector):
        for index, row in enumerate(table_rows(table), start=1):
            columns = cells(row)
            if len(columns) != locators.application_cell_count:
                logger.debug("registry: row %d has %d cells, skipping", index, len(columns))
                continue
            anchor = columns[0].find("a")
            app_id = first_match(pattern, attr_of(anchor, "onclick"))
            if not app_id:
                logger.warning("registry: no application id in row %d, skipping", index)
                continue
            stubs.append(
                ApplicationStub(
                    app_id=app_id,
                    registration_number=text_of(columns[1]),
                    service_type=text_of(columns[2]),
                    status=text_of(columns[3]),
                    date=text_of(columns[4]),
                )
            )
    return stubs


# --- Application page --------------------------------------------------------


def _img_alt(anchor: Tag | None) -> str | None:
    if anchor is None:
        return None
    return attr_of(anchor.find("img"), "alt")


def _spans(cell: Tag, css_class: str) -> list[Tag]:
    return cell.find_all("span", class_=css_class)


def _parse_prepared_documents(rows: list[Tag]) -> list[PreparedDocument]:
    out: list[PreparedDocument] = []
    for row in rows:
        columns = cells(row)
        if len(columns) < 2:
            continue
        link = columns[0].find("a")
        spans = _spans(columns[1], "maintxt")
        out.append(
            PreparedDocument(
                name=text_of(spans[0]) if spans else "",
                date=text_of(spans[-1]) if spans else "",
                link=attr_of(link, "href"),
                type=_img_alt(link),
            )
        )
    return out


def _parse_status_history(rows: list[Tag]) -> list[StatusHistoryEntry]:
    out: list[StatusHistoryEntry] = []
    for row in rows:
        columns = cells(row)
        if len(columns) < 3:
            continue
        link = columns[0].find("a")
        ids = _spans(columns[1], "maintxt")
        dates = _spans(columns[1], "smalltxt")
        decision = text_of(columns[2].find("p"))
        out.append(
            StatusHistoryEntry(
                id=text_of(ids[0]) if ids else "",
                date=text_of(dates[0]) if dates else "",
                status_text=text_of(columns[2].find("span")),
                decision=decision or None,
                link=attr_of(link, "href"),
                type=_img_alt(link),
            )
        )
    return out


def _parse_scanned_documents(rows: list[Tag]) -> list[ScannedDocument]:
    out: list[ScannedDocument] = []
    for row in rows:
        columns = cells(row)
        if len(columns) < 3:
            continue
        image_link = columns[0].find("a")
        dates = _spans(columns[1], "maintxt")
        name_link = columns[2].find("a")
        out.append(
            ScannedDocument(
                name=text_of(name_link),
                date=text_of(dates[0]) if dates else "",
                link=attr_of(name_link, "href") or attr_of(image_link, "href"),
            )
        )
    return out


def _parse_payments(metadata_table: Tag | None, locators: ApplicationPageLocators) -> list[Payment]:
    if metadata_table is None:
        return []
    out: list[Payment] = []
    for table in metadata_table.find_all("table", class_=locators.payments_table_class):
        for row in table_rows(table):
            if row.find("th") is not None:
                continue
            columns = cells(row)
            if len(columns) != locators.payment_cell_count:
                continue
            status = text_of(columns[0])
            # The debt summary row is not a payment.
            if not status or locators.payment_debt_marker in status:
                continue
            out.append(
                Payment(
                    status=status,
                    amount=text_of(columns[1]),
                    bank=text_of(columns[2]),
                    receipt_number=text_of(columns[3]),
                    date=text_of(columns[4]),
                )
            )
    return out


def _party(region: Tag | None, label: str) -> tuple[str, str]:
    """(name/id, address) of an applicant-like cell: leading text node + `<span>`."""

    cell = value_cell(region, label)
    if cell is None:
        return "", ""
    first = next(iter(cell.contents), None)
    return text_of(first), text_of(cell.find("span"))


def _list_items(region: Tag | None, label: str) -> list[str]:
    cell = value_cell(region, label)
    if cell is None:
        return []
    return [text_of(li) for li in cell.find_all("li")]


def parse_application_detail(html: str, app_id: str, locators: ApplicationPageLocators) -> ApplicationDetail:
    soup = parse_html(html)
    css = locators.section_table_class

    metadata_table = find_table_by_caption(
        soup,
        locators.metadata_caption_template.format(app_id=app_id),
        css_class=css,
    )

    region = soup.select_one(locators.applicant_region_selector)
    applicant_name, applicant_address = _party(region, locators.applicant_label)
    representative_name, representative_address = _party(region, locators.representative_label)
    attached = _list_items(region, locators.attached_documents_label)
    attached.extend(
        item + locators.additional_documents_suffix
        for item in _list_items(region, locators.additional_documents_label)
    )
    if region is None:
        logger.debug("registry: no applicant region on application %s", app_id)

    metadata = ApplicationMetadata(
        registration_number=extract_field(metadata_table, locators.registration_number_label),
        service_type=extract_field(metadata_table, locators.service_type_label),
        service_cost_description=extract_field(metadata_table, locators.service_cost_label),
        payable_amount_balance=extract_field(metadata_table, locators.balance_label),
        applicant_name_id=applicant_name,
        applicant_address=applicant_address,
        representative_name_id=representative_name,
        representative_address=representative_address,
        attached_documents=attached,
        note=extract_field(region, locators.note_label),
    )

    return ApplicationDetail(
        prepared_documents=_parse_prepared_documents(
            extract_rows(soup, locators.prepared_documents_caption, css_class=css)
        ),
        status_history=_parse_status_history(
            extract_rows(soup, locators.status_history_caption, css_class=css)
        ),
        scanned_documents=_parse_scanned_documents(
            extract_rows(soup, locators.scanned_documents_caption, css_class=css)
        ),
        payments=_parse_payments(metadata_table, locators),
        metadata=metadata,
    )
