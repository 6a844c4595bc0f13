"""
Sample filings shared by the extraction tests.

Contains:
- An inline XBRL balance sheet with explicit contexts and units
- A plain table with account names but no tags
- A table with no financial vocabulary
"""

# Reference year that makes the 2024 period current and 2023 previous
REFERENCE_YEAR = 2025

INLINE_FILING = """
<html>
<body>
<div style="display:none">
<ix:header>
<ix:resources>
<xbrli:context id="CurrentYearInstant">
  <xbrli:entity>
    <xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001-000</xbrli:identifier>
  </xbrli:entity>
  <xbrli:period><xbrli:instant>2024-03-31</xbrli:instant></xbrli:period>
</xbrli:context>
<xbrli:context id="Prior1YearInstant">
  <xbrli:entity>
    <xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001-000</xbrli:identifier>
  </xbrli:entity>
  <xbrli:period><xbrli:instant>2023-03-31</xbrli:instant></xbrli:period>
</xbrli:context>
<xbrli:context id="CurrentYearDuration">
  <xbrli:entity>
    <xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001-000</xbrli:identifier>
  </xbrli:entity>
  <xbrli:period>
    <xbrli:startDate>2023-04-01</xbrli:startDate>
    <xbrli:endDate>2024-03-31</xbrli:endDate>
  </xbrli:period>
</xbrli:context>
<xbrli:context id="CurrentYearInstant_NonConsolidatedMember">
  <xbrli:entity>
    <xbrli:identifier scheme="http://disclosure.edinet-fsa.go.jp">E00001-000</xbrli:identifier>
    <xbrli:segment>
      <xbrldi:explicitMember dimension="jppfs_cor:ConsolidatedOrNonConsolidatedAxis">jppfs_cor:NonConsolidatedMember</xbrldi:explicitMember>
    </xbrli:segment>
  </xbrli:entity>
  <xbrli:period><xbrli:instant>2024-03-31</xbrli:instant></xbrli:period>
</xbrli:context>
<xbrli:unit id="JPY"><xbrli:measure>iso4217:JPY</xbrli:measure></xbrli:unit>
<xbrli:unit id="JPYPerShares">
  <xbrli:divide>
    <xbrli:unitNumerator><xbrli:measure>iso4217:JPY</xbrli:measure></xbrli:unitNumerator>
    <xbrli:unitDenominator><xbrli:measure>xbrli:shares</xbrli:measure></xbrli:unitDenominator>
  </xbrli:divide>
</xbrli:unit>
</ix:resources>
</ix:header>
</div>

<h2>連結貸借対照表</h2>
<table>
  <tr><th>科目</th><th>前連結会計年度</th><th>当連結会計年度</th></tr>
  <tr><td>資産の部</td><td></td><td></td></tr>
  <tr>
    <td style="padding-left:10px">現金及び預金</td>
    <td><ix:nonFraction name="jppfs_cor:CashAndDeposits" contextRef="Prior1YearInstant" unitRef="JPY" decimals="-6" scale="6">1,000</ix:nonFraction></td>
    <td><ix:nonFraction name="jppfs_cor:CashAndDeposits" contextRef="CurrentYearInstant" unitRef="JPY" decimals="-6" scale="6">1,200</ix:nonFraction></td>
  </tr>
  <tr>
    <td style="padding-left:10px">売掛金</td>
    <td><ix:nonFraction name="jppfs_cor:AccountsReceivableTrade" contextRef="Prior1YearInstant" unitRef="JPY" decimals="-6" scale="6">500</ix:nonFraction></td>
    <td><ix:nonFraction name="jppfs_cor:AccountsReceivableTrade" contextRef="CurrentYearInstant" unitRef="JPY" decimals="-6" scale="6">△450</ix:nonFraction></td>
  </tr>
  <tr>
    <td>資産合計</td>
    <td><ix:nonFraction name="jppfs_cor:Assets" contextRef="Prior1YearInstant" unitRef="JPY" decimals="-6" scale="6">1,500</ix:nonFraction></td>
    <td><ix:nonFraction name="jppfs_cor:Assets" contextRef="CurrentYearInstant" unitRef="JPY" decimals="-6" scale="6">750</ix:nonFraction></td>
  </tr>
</table>

<h3>重要な会計方針</h3>
<p>有形固定資産の減価償却は定額法によっている。</p>
<p>投資有価証券は時価法による。</p>
<h3>その他</h3>
<p>記載事項なし</p>
</body>
</html>
"""

PLAIN_TABLE = """
<html><body>
<table>
  <tr><td>項目</td><td>当期</td></tr>
  <tr><td>資産</td><td>100</td></tr>
  <tr><td>負債</td><td>50</td></tr>
</table>
</body></html>
"""

NON_FINANCIAL_TABLE = """
<html><body>
<table>
  <tr><td>Name</td><td>Age</td></tr>
  <tr><td>Bob</td><td>3</td></tr>
  <tr><td>Ann</td><td>4</td></tr>
</table>
</body></html>
"""
