"""Face picture library."""

from __future__ import annotations

import json
from typing import Any

from ..client import ISAPIClient
from ..const import POST, PUT

Node = dict[str, Any]

ENDPOINT_FDLIB = "Intelligent/FDLib"
ENDPOINT_CAPABILITIES = "Intelligent/FDLib/capabilities"
ENDPOINT_COUNT = "Intelligent/FDLib/Count"
ENDPOINT_SEARCH = "Intelligent/FDLib/FDSearch"
ENDPOINT_FACE_DATA_RECORD = "Intelligent/FDLib/FaceDataRecord"
ENDPOINT_SETUP = "Intelligent/FDLib/FDSetUp"
ENDPOINT_MODIFY = "Intelligent/FDLib/FDModify"

FACE_LIB_TYPE = "blackFD"


class FaceService:
    """Manage face pictures of access control terminals."""

    def __init__(self, client: ISAPIClient) -> None:
        """Initialize."""
        self.client = client

    def get_libraries(self) -> Node:
        return self.client.get(ENDPOINT_FDLIB)

    def create_library(self, data: Node) -> Node:
        return self.client.post(ENDPOINT_FDLIB, data)

    def get_capabilities(self) -> Node:
        return self.client.get(ENDPOINT_CAPABILITIES)

    def search(
        self,
        page: int = 0,
        max_results: int = 30,
        face_lib_type: str = FACE_LIB_TYPE,
        fdid: int | None = None,
        fpid: str | None = None,
    ) -> Node:
        """Search face records, `page` starts at 0."""
        data: Node = {
            "searchResultPosition": page * max_results,
            "maxResults": max_results,
            "faceLibType": face_lib_type,
        }
        if fdid is not None:
            data["FDID"] = str(fdid)
        if fpid is not None:
            data["FPID"] = fpid
        return self.client.post(ENDPOINT_SEARCH, data)

    def delete_records(self, fdid: int, face_lib_type: str = FACE_LIB_TYPE) -> Node:
        return self.client.put(f"{ENDPOINT_SEARCH}/Delete", {}, {"FDID": fdid, "faceLibType": face_lib_type})

    def delete_face(self, fdid: int, fpid: int | str) -> Node:
        return self.client.delete(f"{ENDPOINT_FDLIB}/{fdid}/picture/{fpid}")

    def delete_all_libraries(self) -> Node:
        """Delete all face pictures in all libraries."""
        return self.client.delete(ENDPOINT_FDLIB)

    def count(self, fdid: int | None = None, face_lib_type: str = FACE_LIB_TYPE, terminal_no: str | None = None) -> int:
        """Count face records, in all libraries unless `fdid` is given."""
        params = None
        if fdid is not None:
            params = {"FDID": fdid, "faceLibType": face_lib_type, "terminalNo": terminal_no}
        response = self.client.get(ENDPOINT_COUNT, params)
        return int(response.get("recordDataNumber", 0) or 0)

    def _send_face(
        self,
        method: str,
        endpoint: str,
        fdid: int,
        fpid: str,
        image: bytes,
        filename: str,
        face_lib_type: str,
        extra: Node | None,
    ) -> Node:
        face_data = {
            "faceLibType": face_lib_type,
            "FDID": str(fdid),
            "FPID": fpid,
            **(extra or {}),
        }
        form = {"faceURL": json.dumps(face_data)}
        files = {"img": (filename, image, "image/jpeg")}
        if method == PUT:
            return self.client.put_multipart(endpoint, files, form)
        return self.client.post_multipart(endpoint, files, form)

    def upload_face(
        self,
        fdid: int,
        fpid: str,
        image: bytes,
        face_lib_type: str = FACE_LIB_TYPE,
        extra: Node | None = None,
    ) -> Node:
        """Add JPEG face picture, `fpid` usually matches the employee number."""
        return self._send_face(POST, ENDPOINT_FACE_DATA_RECORD, fdid, fpid, image, "facePic.jpg", face_lib_type, extra)

    def setup_face(
        self,
        fdid: int,
        fpid: str,
        image: bytes,
        face_lib_type: str = FACE_LIB_TYPE,
        extra: Node | None = None,
    ) -> Node:
        """Link face picture to the person record."""
        return self._send_face(PUT, ENDPOINT_SETUP, fdid, fpid, image, "faceImage.jpg", face_lib_type, extra)

    def modify_face(
        self,
        fdid: int,
        fpid: str,
        image: bytes,
        face_lib_type: str = FACE_LIB_TYPE,
        extra: Node | None = None,
    ) -> Node:
        return self._send_face(PUT, ENDPOINT_MODIFY, fdid, fpid, image, "faceImage.jpg", face_lib_type, extra)
