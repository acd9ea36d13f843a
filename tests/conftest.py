import pytest


SECTIONS_HEADER = (
    "<tr><th>Section</th><th>Date &amp; Time</th><th>Room</th><th>Instructor</th>"
    "<th>TA/IA/GTA</th><th>Quota</th><th>Enrol</th><th>Avail</th><th>Wait</th>"
    "<th>Remarks</th></tr>"
)

ACCT_1010 = """
<div class="course">
  <a name="ACCT1010"></a>
  <h2>ACCT 1010 - Accounting, Business and Society (3 units)</h2>
  <div class="courseinfo">
    <div class="popup attrword"><span class="crseattrword">[CC22]</span><div class="popupdetail">Students admitted from 2022</div></div>
    <div class="popup attrword"><span class="crseattrword">[4Y]</span><div class="popupdetail">Students admitted before 2022</div></div>
    <div class="popup courseattr">
      <div class="popupdetail">
        <table width="400">
          <tr><th>ATTRIBUTES</th><td>Common Core (SA) for 36-credit program<br>Common Core (SA) for 30-credit program</td></tr>
          <tr><th>EXCLUSION</th><td>ACCT 2010, CORE 1310</td></tr>
          <tr><th>INTENDED
            LEARNING   OUTCOMES</th><td>On successful completion of the course, students will be able to:<table style="border:0px;">
              <tr><td>1.</td><td>Describe the background of development of
                corporate governance.</td></tr>
              <tr><td>2.</td><td>Apply probity and ethical standards in governance.</td></tr>
            </table></td></tr>
        </table>
      </div>
    </div>
  </div>
  <table class="sections" width="1012">
    """ + SECTIONS_HEADER + """
    <tr class="newsect secteven">
      <td align="center" rowspan="2">L1 (1023)</td>
      <td>WeFr 04:30PM - 05:50PM</td>
      <td>Lecture Theater A</td>
      <td><a href="/wcq/cgi-bin/2330/instructor/DAI, Ting">DAI, Ting</a><br><a href="/wcq/cgi-bin/2330/instructor/DENG, Jin">DENG, Jin</a><br><a href="/wcq/cgi-bin/2330/instructor/YI, Yi">YI, Yi</a></td>
      <td rowspan="2"><a href="/wcq/cgi-bin/2330/instructor/CHAN, Tai Man">CHAN, Tai Man</a></td>
      <td align="center" rowspan="2"><span>120</span><div class="quotadetail">Quota/Enrol/Avail<br>ACCT: 68/43/25<br>ECON: 70/50/20<br></div></td>
      <td align="center" rowspan="2">93</td>
      <td align="center" rowspan="2">27</td>
      <td align="center" rowspan="2">0</td>
      <td rowspan="2"><div class="popup classnotes"><div class="popupdetail">&gt; For MSc(ACCT) students only<br>&gt; Add/Drop Deadline : 08-Apr-2024</div></div></td>
    </tr>
    <tr class="secteven">
      <td>Mo 09:00AM - 10:20AM</td>
      <td>Rm 2465, Lift 25-26 (122)</td>
      <td>Staff</td>
    </tr>
    <tr class="newsect sectodd">
      <td align="center">T1 (1024)</td>
      <td>17-JUN-2024 - 12-JUL-2024<br>MoWeFr 02:00PM - 05:50PM</td>
      <td>Rm 4619, Lift 31-32 (126)</td>
      <td>TBA</td>
      <td>TBA</td>
      <td align="center">40</td>
      <td align="center">38</td>
      <td align="center">2</td>
      <td align="center">5</td>
      <td><div class="popup classnotes"><div class="popupdetail">Instructor Consent Required</div></div></td>
    </tr>
    <tr class="newsect secteven">
      <td align="center">L2 (1025)</td>
      <td>TBA</td>
      <td>TBA</td>
      <td>Staff</td>
      <td>TBA</td>
      <td align="center">30</td>
      <td align="center">0</td>
      <td align="center">30</td>
      <td align="center">0</td>
      <td>&nbsp;</td>
    </tr>
  </table>
</div>
"""

ACCT_5170 = """
<div class="course">
  <h2>ACCT 5170 - Corporate Governance (1.5 units)</h2>
  <div class="courseinfo">
    <div class="popup courseattr">
      <div class="popupdetail">
        <table width="400">
          <tr><th>DESCRIPTION</th><td>Principles of corporate governance.</td></tr>
        </table>
      </div>
    </div>
  </div>
</div>
"""

BAD_HEADING = """
<div class="course">
  <h2>ACCT 9999 Seminar without units</h2>
  <table class="sections">
    """ + SECTIONS_HEADER + """
  </table>
</div>
"""


def subject_page(*blocks: str) -> str:
    return (
        "<html><head><title>ACCT</title></head><body>"
        '<div class="depts"><a href="/wcq/cgi-bin/2330/subject/ACCT">ACCT</a></div>'
        '<div id="classes">' + "".join(blocks) + "</div></body></html>"
    )


@pytest.fixture
def acct_page() -> str:
    return subject_page(ACCT_1010, ACCT_5170)


@pytest.fixture
def page_with_bad_heading() -> str:
    return subject_page(ACCT_5170, BAD_HEADING)
