"""
Client for the Tally accounting server's XML-over-HTTP interface
"""
from typing import Optional
import httpx
import logging

from services.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

# Read-only export of the company list; cheap way to see if Tally answers
TEST_CONNECTION_XML = """
<ENVELOPE>
    <HEADER>
        <TALLYREQUEST>Export</TALLYREQUEST>
    </HEADER>
    <BODY>
        <EXPORTDATA>
            <REQUESTDESC>
                <REPORTNAME>List of Companies</REPORTNAME>
                <STATICVARIABLES>
                    <SVEXPORTFORMAT>$$SysName:XML</SVEXPORTFORMAT>
                </STATICVARIABLES>
            </REQUESTDESC>
        </EXPORTDATA>
    </BODY>
</ENVELOPE>"""

CONNECTION_FAILED_MESSAGE = "Connection failed. Please ensure Tally is running and the port is accessible."
CONNECTION_REFUSED_MESSAGE = "Connection refused. Is Tally running on the specified port? Check your firewall settings."


class TallyClient:

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def _post_xml(self, xml: str) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.base_url,
                    content=xml.encode("utf-8"),
                    headers={"Content-Type": "application/xml"},
                )
        except httpx.ConnectError as e:
            logger.error(f"Tally connection refused at {self.base_url}: {e}")
            raise UpstreamServiceError(CONNECTION_REFUSED_MESSAGE)
        except httpx.TimeoutException:
            logger.warning(f"Tally request to {self.base_url} timed out")
            raise UpstreamServiceError("Tally did not respond in time. Please try again later.")
        except httpx.HTTPError as e:
            logger.error(f"Tally request error: {str(e)}")
            raise UpstreamServiceError(CONNECTION_FAILED_MESSAGE)

        if not response.is_success:
            logger.warning(f"Tally server responded with status: {response.status_code}")
            raise UpstreamServiceError(f"Tally server responded with status: {response.status_code}")

        return response

    def proxy(self, xml: str) -> str:
        """Forward a raw XML request and return Tally's XML reply"""
        return self._post_xml(xml).text

    def test_connection(self) -> dict:
        response = self._post_xml(TEST_CONNECTION_XML)

        # Anything that is not a Tally envelope means some other service owns the port
        if "<ENVELOPE>" not in response.text:
            logger.warning("Tally connection test got a non-Tally response")
            raise UpstreamServiceError("Received an invalid response from the Tally port. Is Tally running?")

        return {"status": "success", "message": "Tally connection successful!"}
