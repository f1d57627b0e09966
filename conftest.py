"""
テスト共通フィクスチャ

決算短信XBRLのサンプル（当期・前期）と、それを格納したZIPアーカイブを提供します。
"""

import io
import zipfile

import pytest

SAMPLE_XBRL = """<?xml version="1.0" encoding="UTF-8"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"
            xmlns:jpcrp="http://disclosure.edinet-fsa.go.jp/taxonomy/jpcrp/2023-11-01/jpcrp_cor"
            xmlns:iso4217="http://www.xbrl.org/2003/iso4217">
  <xbrli:context id="CurrentYearInstant">
    <xbrli:entity><xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001</xbrli:identifier></xbrli:entity>
    <xbrli:period><xbrli:instant>2023-09-30</xbrli:instant></xbrli:period>
  </xbrli:context>
  <xbrli:context id="CurrentYearDuration">
    <xbrli:entity><xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001</xbrli:identifier></xbrli:entity>
    <xbrli:period>
      <xbrli:startDate>2023-04-01</xbrli:startDate>
      <xbrli:endDate>2023-09-30</xbrli:endDate>
    </xbrli:period>
  </xbrli:context>
  <xbrli:context id="PreviousYearDuration">
    <xbrli:entity><xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001</xbrli:identifier></xbrli:entity>
    <xbrli:period>
      <xbrli:startDate>2022-04-01</xbrli:startDate>
      <xbrli:endDate>2022-09-30</xbrli:endDate>
    </xbrli:period>
  </xbrli:context>
  <xbrli:unit id="JPY"><xbrli:measure>iso4217:JPY</xbrli:measure></xbrli:unit>
  <jpcrp:NetSales contextRef="CurrentYearDuration" unitRef="JPY" decimals="-6" scale="6">50000</jpcrp:NetSales>
  <jpcrp:NetSales contextRef="PreviousYearDuration" unitRef="JPY" decimals="-6" scale="6">45000</jpcrp:NetSales>
  <jpcrp:OperatingProfit contextRef="CurrentYearDuration" unitRef="JPY" decimals="-6" scale="6">5000</jpcrp:OperatingProfit>
  <jpcrp:OperatingProfit contextRef="PreviousYearDuration" unitRef="JPY" decimals="-6" scale="6">4500</jpcrp:OperatingProfit>
  <jpcrp:NetIncome contextRef="CurrentYearDuration" unitRef="JPY" decimals="-6" scale="6">3000</jpcrp:NetIncome>
  <jpcrp:NetIncome contextRef="PreviousYearDuration" unitRef="JPY" decimals="-6" scale="6">2800</jpcrp:NetIncome>
  <jpcrp:EarningsPerShare contextRef="CurrentYearDuration" unitRef="JPY" decimals="2">300</jpcrp:EarningsPerShare>
  <jpcrp:ReturnOnEquity contextRef="CurrentYearDuration" unitRef="pure" decimals="1">12.5</jpcrp:ReturnOnEquity>
</xbrli:xbrl>
"""

# 前期のみ（当期データなし）
PREVIOUS_ONLY_XBRL = """<?xml version="1.0" encoding="UTF-8"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"
            xmlns:jpcrp="http://disclosure.edinet-fsa.go.jp/taxonomy/jpcrp/2023-11-01/jpcrp_cor">
  <xbrli:context id="PreviousYearDuration">
    <xbrli:period>
      <xbrli:startDate>2022-04-01</xbrli:startDate>
      <xbrli:endDate>2022-09-30</xbrli:endDate>
    </xbrli:period>
  </xbrli:context>
  <jpcrp:NetSales contextRef="PreviousYearDuration" unitRef="JPY" scale="6">45000</jpcrp:NetSales>
</xbrli:xbrl>
"""


def build_archive(entries):
    """(entry name, content) のリストからZIPアーカイブのバイト列を作る"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zip_file:
        for name, content in entries:
            zip_file.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def sample_xbrl():
    return SAMPLE_XBRL


@pytest.fixture
def sample_archive():
    return build_archive([
        ("XBRL/AuditDoc/audit.xbrl", "<not-used/>"),
        ("XBRL/PublicDoc/test.xbrl", SAMPLE_XBRL),
    ])


@pytest.fixture
def previous_only_archive():
    return build_archive([("XBRL/PublicDoc/test.xbrl", PREVIOUS_ONLY_XBRL)])


@pytest.fixture
def kessan_doc():
    return {
        "docID": "S100TEST",
        "secCode": "72030",
        "filerName": "テスト株式会社",
        "docDescription": "四半期決算短信〔日本基準〕（連結）",
        "submitDateTime": "2024-12-27 15:00",
    }
